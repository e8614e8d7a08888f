from __future__ import annotations

import asyncio

import httpx
import pytest

import polychat_providers
from polychat_providers.base.capabilities import Capability
from polychat_providers.base.dto import ProviderSettings
from polychat_providers.base.errors import ErrorCode, ProviderError
from polychat_providers.base.factory import ProviderFactory, ProviderKind, UnknownProviderError
from polychat_providers.base.interfaces import ChatProvider
from polychat_providers.config import StaticSettingsSource
from polychat_providers.custom import CustomProvider
from polychat_providers.di import ProviderRegistry, build_registry
from polychat_providers.gemini import GeminiProvider
from polychat_providers.openai import OpenAIProvider


def _registry(settings=None) -> ProviderRegistry:
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={}))
    return build_registry(StaticSettingsSource(settings or {}), http_transport=transport)


@pytest.mark.parametrize(
    "provider_id,kind",
    [
        ("openai", ProviderKind.OPENAI),
        ("OpenAI", ProviderKind.OPENAI),
        (" gemini ", ProviderKind.GEMINI),
        ("anthropic", ProviderKind.ANTHROPIC),
        ("openrouter", ProviderKind.OPENROUTER),
        ("TensorBlock", ProviderKind.TENSORBLOCK),
        ("Forge", ProviderKind.TENSORBLOCK),
        ("Fireworks.ai", ProviderKind.FIREWORKS),
        ("together", ProviderKind.TOGETHER),
        ("Together.ai", ProviderKind.TOGETHER),
        ("my-llm", ProviderKind.CUSTOM),
        ("", ProviderKind.CUSTOM),
    ],
)
def test_kind_resolution(provider_id, kind):
    assert ProviderKind.resolve(provider_id) is kind  # nosec B101


def test_factory_builds_every_kind():
    assert ProviderFactory.supported() == (  # nosec B101
        "openai", "anthropic", "gemini", "openrouter", "tensorblock", "fireworks", "together", "custom",
    )
    for kind in ProviderFactory.supported():
        provider = ProviderFactory.create(kind, settings=ProviderSettings(api_key="k"))
        assert isinstance(provider, ChatProvider)  # nosec B101
        assert provider.id == kind  # nosec B101


def test_factory_wraps_constructor_errors():
    with pytest.raises(UnknownProviderError) as ei:
        ProviderFactory.create("openai", unexpected=True)
    assert isinstance(ei.value.__cause__, TypeError)  # nosec B101


@pytest.mark.asyncio
async def test_registry_returns_stable_instances():
    registry = _registry({"openai": {"api_key": "sk-1"}})
    first = registry.get("openai")
    assert registry.get("openai") is first  # nosec B101
    assert isinstance(first, OpenAIProvider)  # nosec B101
    assert registry.kind_of("openai") is ProviderKind.OPENAI  # nosec B101
    assert registry.cached_ids() == ["openai"]  # nosec B101
    await registry.aclose()


@pytest.mark.asyncio
async def test_reconfigure_replaces_entry_without_mutating_old_instance():
    source = StaticSettingsSource({"openai": {"api_key": "sk-1"}})
    registry = ProviderRegistry(source)
    old = registry.get("openai")
    source.set("openai", {"api_key": "sk-2"})
    new = registry.reconfigure("openai")
    assert new is not old  # nosec B101
    assert registry.get("openai") is new  # nosec B101
    assert old.api_key == "sk-1" and new.api_key == "sk-2"  # nosec B101
    await registry.aclose()
    assert registry.cached_ids() == []  # nosec B101


@pytest.mark.asyncio
async def test_replaced_provider_is_closed_once_idle():
    registry = _registry({"openai": {"api_key": "sk-1"}})
    old = registry.get("openai")
    new = registry.reconfigure("openai")
    await asyncio.sleep(0.05)
    assert old.http.is_closed  # nosec B101
    assert not new.http.is_closed  # nosec B101
    await registry.aclose()
    assert new.http.is_closed  # nosec B101


def test_replaced_provider_outside_a_loop_waits_for_aclose():
    registry = _registry({"openai": {"api_key": "sk-1"}})
    old = registry.get("openai")
    registry.reconfigure("openai")
    assert not old.http.is_closed  # nosec B101
    asyncio.run(registry.aclose())
    assert old.http.is_closed  # nosec B101


def test_unknown_ids_get_custom_adapter():
    registry = _registry({"my-llm": {"api_key": "k", "base_url": "http://localhost:9000", "name": "Local"}})
    provider = registry.get("my-llm")
    assert isinstance(provider, CustomProvider)  # nosec B101
    assert provider.name == "Local"  # nosec B101
    assert provider.id == "my-llm"  # nosec B101


def test_providers_with_capability():
    registry = _registry()
    image_providers = registry.providers_with_capability(Capability.IMAGE_GENERATION)
    assert [p.id for p in image_providers] == ["openai"]  # nosec B101
    vision = registry.providers_with_capability(Capability.VISION_ANALYSIS, ["gemini", "my-llm"])
    assert [p.id for p in vision] == ["gemini"]  # nosec B101
    assert isinstance(registry.get("gemini"), GeminiProvider)  # nosec B101


def test_package_create_uses_merged_config(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    provider = polychat_providers.create("openai")
    assert provider.has_valid_api_key()  # nosec B101
    assert provider.base_url == "https://api.openai.com/v1"  # nosec B101
    assert [m.id for m in provider.available_models][:1] == ["gpt-4o"]  # nosec B101


def test_package_create_wraps_failures():
    with pytest.raises(ProviderError) as ei:
        polychat_providers.create("openai", ProviderSettings(), bogus=1)
    assert ei.value.code is ErrorCode.CONFIGURATION  # nosec B101
    assert ei.value.message.startswith("Failed to create provider 'openai':")  # nosec B101
