"""Settings sources injected into the provider registry.

The registry never reads configuration itself; it asks a ``SettingsSource``
for a provider's settings each time it builds an instance. That keeps
credentials out of global state and lets tests hand in fixed settings.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, Union, runtime_checkable

from ..base.dto.provider_settings import ModelSettings, ProviderSettings


@runtime_checkable
class SettingsSource(Protocol):
    def get_provider_settings(self, provider_id: str) -> ProviderSettings: ...


def _coerce_models(raw: Any) -> list:
    models = []
    for entry in raw or []:
        if isinstance(entry, str):
            models.append(ModelSettings(id=entry))
        elif isinstance(entry, ModelSettings):
            models.append(entry)
        elif isinstance(entry, Mapping):
            models.append(ModelSettings.model_validate(dict(entry)))
    return models


def settings_from_mapping(data: Mapping[str, Any]) -> ProviderSettings:
    """Validate a loose mapping (config file/env merge) into ``ProviderSettings``."""
    payload: Dict[str, Any] = dict(data)
    payload["models"] = _coerce_models(payload.get("models"))
    if payload.get("api_key") is None:
        payload["api_key"] = ""
    return ProviderSettings.model_validate(payload)


class ConfigSettingsSource:
    """Settings backed by :func:`polychat_providers.config.get_provider_config`."""

    def __init__(self, overrides: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._overrides = {k.lower(): dict(v) for k, v in (overrides or {}).items()}

    def get_provider_settings(self, provider_id: str) -> ProviderSettings:
        from . import get_provider_config

        merged = get_provider_config(provider_id, self._overrides.get(provider_id.lower()))
        return settings_from_mapping(merged)


class StaticSettingsSource:
    """In-memory settings keyed by provider id (case-insensitive)."""

    def __init__(
        self, settings: Optional[Mapping[str, Union[ProviderSettings, Mapping[str, Any]]]] = None
    ) -> None:
        self._settings: Dict[str, ProviderSettings] = {}
        for provider_id, value in (settings or {}).items():
            self.set(provider_id, value)

    def set(self, provider_id: str, value: Union[ProviderSettings, Mapping[str, Any]]) -> None:
        settings = value if isinstance(value, ProviderSettings) else settings_from_mapping(value)
        self._settings[provider_id.lower()] = settings

    def get_provider_settings(self, provider_id: str) -> ProviderSettings:
        return self._settings.get(provider_id.lower(), ProviderSettings())


__all__ = [
    "SettingsSource",
    "ConfigSettingsSource",
    "StaticSettingsSource",
    "settings_from_mapping",
]
