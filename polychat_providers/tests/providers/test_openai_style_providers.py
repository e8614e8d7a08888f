"""OpenAI, OpenRouter and custom endpoints over ``httpx.MockTransport``."""
from __future__ import annotations

import asyncio
import json
from typing import Callable, Dict, List, Tuple

import httpx
import pytest

from polychat_providers.base.capabilities import Capability
from polychat_providers.base.dto import (
    CompletionOptions,
    ImageGenerationOptions,
    ModelSettings,
    ProviderSettings,
    ToolDefinition,
)
from polychat_providers.base.errors import ErrorCode, ProviderError
from polychat_providers.base.resilience import RetryConfig
from polychat_providers.base.tools import ToolRegistry
from polychat_providers.custom import CustomProvider
from polychat_providers.openai import OpenAIProvider
from polychat_providers.openrouter import OpenRouterProvider

Route = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Routes ``(method, path)`` to canned responses and records requests."""

    def __init__(self, routes: Dict[Tuple[str, str], Route]) -> None:
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": {"message": "no route"}})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


def _openai(backend: FakeBackend, recording_sleep, **settings) -> OpenAIProvider:
    settings.setdefault("api_key", "sk-test")
    settings.setdefault("models", [ModelSettings(id="gpt-4o", capabilities=["vision", "tools"])])
    return OpenAIProvider(
        "openai",
        ProviderSettings(**settings),
        http_transport=backend.transport,
        sleep=recording_sleep,
    )


def _stream_response(sse_body, payloads, headers=None) -> Route:
    return lambda request: httpx.Response(
        200,
        content=sse_body(payloads),
        headers={"content-type": "text/event-stream", **(headers or {})},
    )


@pytest.mark.asyncio
async def test_streaming_text_and_tool_call(recording_sleep, sse_body, chat_harness):
    chunks = [
        {"choices": [{"index": 0, "delta": {"role": "assistant", "content": "He"}}]},
        {"choices": [{"index": 0, "delta": {"content": "llo"}}]},
        {"choices": [{"index": 0, "delta": {"tool_calls": [
            {"index": 0, "id": "call_a", "function": {"name": "search", "arguments": ""}}]}}]},
        {"choices": [{"index": 0, "delta": {"tool_calls": [{"index": 0, "function": {"arguments": '{"q":'}}]}}]},
        {"choices": [{"index": 0, "delta": {"tool_calls": [{"index": 0, "function": {"arguments": '"cats"}'}}]}}]},
        {"choices": [{"index": 0, "delta": {}, "finish_reason": "tool_calls"}]},
        {"choices": [], "usage": {"prompt_tokens": 9, "completion_tokens": 4, "total_tokens": 13}},
    ]
    backend = FakeBackend({
        ("POST", "/v1/chat/completions"): _stream_response(
            sse_body, chunks, {"x-ratelimit-remaining-requests": "41"}
        ),
    })
    provider = _openai(backend, recording_sleep, organization="org-1")
    seen = []
    tools = ToolRegistry()
    tools.register_function("search", lambda args: seen.append(args) or "found")
    h = chat_harness()

    message = await provider.get_chat_completion(
        h.history,
        CompletionOptions(provider="openai", model="gpt-4o", temperature=0.2, tool_choice="search"),
        h.handler,
        tools=tools,
    )

    assert h.chunks == ["He", "Hello"]  # nosec B101
    assert message.text == "Hello" and message.tokens == 13  # nosec B101
    assert seen == [{"q": "cats"}]  # nosec B101
    assert h.tool_updates[-1] == ("call_a", "completed", "found", None)  # nosec B101

    request = backend.requests[0]
    assert request.headers["authorization"] == "Bearer sk-test"  # nosec B101
    assert request.headers["openai-organization"] == "org-1"  # nosec B101
    body = backend.body()
    assert body["stream"] is True  # nosec B101
    assert body["stream_options"] == {"include_usage": True}  # nosec B101
    assert body["temperature"] == 0.2  # nosec B101
    assert "top_p" not in body  # nosec B101
    assert body["messages"] == [{"role": "user", "content": [{"type": "text", "text": "Hi"}]}]  # nosec B101
    assert body["tools"][0]["function"]["name"] == "search"  # nosec B101
    assert body["tool_choice"] == {"type": "function", "function": {"name": "search"}}  # nosec B101
    assert provider.get_rate_limit_info().remaining == 41  # nosec B101


@pytest.mark.asyncio
async def test_blocking_completion(recording_sleep, chat_harness):
    backend = FakeBackend({
        ("POST", "/v1/chat/completions"): lambda r: httpx.Response(200, json={
            "choices": [{"message": {"content": "  Hi there  "}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 2, "completion_tokens": 3, "total_tokens": 5},
        }),
    })
    provider = _openai(backend, recording_sleep)
    h = chat_harness()
    message = await provider.get_chat_completion(
        h.history, CompletionOptions(provider="openai", model="gpt-4o", stream=False), h.handler
    )
    assert message.text == "  Hi there  "  # nosec B101
    assert h.chunks == ["  Hi there  "]  # nosec B101
    assert "stream" not in backend.body()  # nosec B101
    assert "openai-organization" not in backend.requests[0].headers  # nosec B101


@pytest.mark.asyncio
async def test_blocking_tool_call_with_malformed_arguments_is_reported(recording_sleep, chat_harness):
    backend = FakeBackend({
        ("POST", "/v1/chat/completions"): lambda r: httpx.Response(200, json={
            "choices": [{"message": {"content": None, "tool_calls": [
                {"id": "call_1", "type": "function", "function": {"name": "echo", "arguments": '{"q": '}},
            ]}, "finish_reason": "tool_calls"}],
        }),
    })
    seen = []
    tools = ToolRegistry()
    tools.register_function("echo", lambda args: seen.append(args) or "echoed")
    provider = _openai(backend, recording_sleep)
    h = chat_harness()
    await provider.get_chat_completion(
        h.history, CompletionOptions(provider="openai", model="gpt-4o", stream=False), h.handler,
        tools=tools,
    )
    assert seen == []  # nosec B101
    assert h.tool_updates[-1][1] == "error"  # nosec B101
    assert h.tool_updates[-1][3].startswith("Invalid tool arguments")  # nosec B101
    assert h.events[-1] == "finish"  # nosec B101


@pytest.mark.asyncio
async def test_missing_key_fails_before_network(recording_sleep, chat_harness):
    backend = FakeBackend({})
    provider = _openai(backend, recording_sleep, api_key="  ")
    h = chat_harness()
    assert not provider.has_valid_api_key()  # nosec B101
    with pytest.raises(ProviderError) as ei:
        await provider.get_chat_completion(
            h.history, CompletionOptions(provider="openai", model="gpt-4o"), h.handler
        )
    assert ei.value.code is ErrorCode.CONFIGURATION  # nosec B101
    assert ei.value.message == "OpenAI API key is not configured"  # nosec B101
    assert backend.requests == []  # nosec B101


@pytest.mark.asyncio
async def test_server_error_is_retried_then_wrapped(recording_sleep, chat_harness):
    backend = FakeBackend({
        ("POST", "/v1/chat/completions"): lambda r: httpx.Response(503, json={"error": {"message": "overloaded"}}),
    })
    provider = _openai(backend, recording_sleep)
    h = chat_harness()
    with pytest.raises(ProviderError) as ei:
        await provider.get_chat_completion(
            h.history, CompletionOptions(provider="openai", model="gpt-4o"), h.handler
        )
    assert len(backend.requests) == 4  # nosec B101
    assert recording_sleep.calls == [1.0, 2.0, 4.0]  # nosec B101
    assert ei.value.code is ErrorCode.UNAVAILABLE  # nosec B101
    assert "overloaded" in ei.value.message  # nosec B101


@pytest.mark.asyncio
async def test_image_generation(recording_sleep):
    backend = FakeBackend({
        ("POST", "/v1/images/generations"): lambda r: httpx.Response(
            200, json={"data": [{"url": "https://img.test/1.png"}, {"b64_json": "AAAA"}]}
        ),
    })
    provider = _openai(backend, recording_sleep)
    images = await provider.get_image_generation("a cat", ImageGenerationOptions(n=2))
    assert images == ["https://img.test/1.png", "data:image/png;base64,AAAA"]  # nosec B101
    body = backend.body()
    assert body["model"] == "dall-e-3" and body["n"] == 2 and body["prompt"] == "a cat"  # nosec B101


@pytest.mark.asyncio
async def test_image_generation_failure_is_wrapped(recording_sleep):
    backend = FakeBackend({
        ("POST", "/v1/images/generations"): lambda r: httpx.Response(
            400, json={"error": {"message": "content policy"}}
        ),
    })
    provider = _openai(backend, recording_sleep)
    with pytest.raises(ProviderError) as ei:
        await provider.get_image_generation("x")
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101
    assert ei.value.message.startswith("OpenAI image generation failed: API Error (400")  # nosec B101


@pytest.mark.asyncio
async def test_image_tool_is_served_when_advertised(recording_sleep, sse_body, chat_harness):
    chunks = [
        {"choices": [{"index": 0, "delta": {"tool_calls": [{"index": 0, "id": "call_img", "function": {
            "name": "generate_image", "arguments": '{"prompt": "a red fox"}'}}]}}]},
        {"choices": [{"index": 0, "delta": {}, "finish_reason": "tool_calls"}]},
    ]
    backend = FakeBackend({
        ("POST", "/v1/chat/completions"): _stream_response(sse_body, chunks),
        ("POST", "/v1/images/generations"): lambda r: httpx.Response(200, json={"data": [{"url": "u1"}]}),
    })
    provider = _openai(backend, recording_sleep)
    h = chat_harness()
    await provider.get_chat_completion(
        h.history,
        CompletionOptions(
            provider="openai", model="gpt-4o",
            tools=(ToolDefinition(name="generate_image", description="draw"),),
        ),
        h.handler,
    )
    assert h.tool_updates[-1] == ("call_img", "completed", {"images": ["u1"]}, None)  # nosec B101
    assert json.loads(backend.requests[1].content)["prompt"] == "a red fox"  # nosec B101


@pytest.mark.asyncio
async def test_model_listing_filters_chat_models(recording_sleep):
    backend = FakeBackend({
        ("GET", "/v1/models"): lambda r: httpx.Response(200, json={"data": [
            {"id": "gpt-4o"}, {"id": "text-embedding-3-small"}, {"id": "o3-mini"},
            {"id": "gpt-4o-realtime-preview"}, {"id": "dall-e-3"},
        ]}),
    })
    provider = _openai(backend, recording_sleep)
    models = await provider.fetch_available_models()
    assert [m.id for m in models] == ["gpt-4o", "o3-mini"]  # nosec B101
    assert provider.get_model_capabilities("gpt-4o") >= {Capability.VISION_ANALYSIS}  # nosec B101
    assert Capability.CHAT_COMPLETION in provider.get_model_capabilities("o3-mini")  # nosec B101


@pytest.mark.asyncio
async def test_model_listing_failure_keeps_previous_catalog(recording_sleep):
    backend = FakeBackend({
        ("GET", "/v1/models"): lambda r: httpx.Response(500, json={"error": {"message": "down"}}),
    })
    provider = OpenAIProvider(
        "openai",
        ProviderSettings(api_key="sk", models=[ModelSettings(id="gpt-4o")]),
        retry=RetryConfig(max_retries=0),
        http_transport=backend.transport,
    )
    models = await provider.fetch_available_models()
    assert [m.id for m in models] == ["gpt-4o"]  # nosec B101
    assert len(backend.requests) == 1  # nosec B101


@pytest.mark.asyncio
async def test_update_api_key_swaps_credentials(recording_sleep):
    backend = FakeBackend({
        ("GET", "/v1/models"): lambda r: httpx.Response(200, json={"data": []}),
    })
    provider = _openai(backend, recording_sleep)
    old_http = provider.http
    await provider.fetch_available_models()
    provider.update_api_key("sk-new")
    assert provider.http is not old_http  # nosec B101
    await provider.fetch_available_models()
    assert backend.requests[0].headers["authorization"] == "Bearer sk-test"  # nosec B101
    assert backend.requests[1].headers["authorization"] == "Bearer sk-new"  # nosec B101
    assert old_http.is_closed and not provider.http.is_closed  # nosec B101
    await provider.aclose()


@pytest.mark.asyncio
async def test_replaced_client_stays_open_until_its_call_finishes(recording_sleep, chat_harness):
    started, release = asyncio.Event(), asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await release.wait()
        return httpx.Response(200, json={"choices": [{"message": {"content": "done"}}]})

    provider = OpenAIProvider(
        "openai", ProviderSettings(api_key="sk-test"),
        http_transport=httpx.MockTransport(handler), sleep=recording_sleep,
    )
    old_http = provider.http
    h = chat_harness()
    task = asyncio.ensure_future(provider.get_chat_completion(
        h.history, CompletionOptions(provider="openai", model="gpt-4o", stream=False), h.handler
    ))
    await started.wait()
    provider.update_api_key("sk-new")
    assert not old_http.is_closed  # nosec B101
    release.set()
    message = await task
    assert message.text == "done"  # nosec B101
    assert old_http.is_closed and not provider.http.is_closed  # nosec B101
    await provider.aclose()


def test_failed_rebuild_keeps_previous_key_and_client(recording_sleep):
    class StrictKeyProvider(OpenAIProvider):
        def _build_transport(self):
            if self.api_key == "sk-broken":
                raise ValueError("rejected key")
            return super()._build_transport()

    provider = StrictKeyProvider(
        "openai", ProviderSettings(api_key="sk-test"),
        http_transport=FakeBackend({}).transport, sleep=recording_sleep,
    )
    old_http = provider.http
    with pytest.raises(ValueError):
        provider.update_api_key("sk-broken")
    assert provider.api_key == "sk-test"  # nosec B101
    assert provider.http is old_http  # nosec B101


@pytest.mark.asyncio
async def test_openrouter_attribution_headers(recording_sleep, sse_body, chat_harness):
    backend = FakeBackend({
        ("POST", "/api/v1/chat/completions"): _stream_response(
            sse_body, [{"choices": [{"index": 0, "delta": {"content": "ok"}}]}]
        ),
    })
    provider = OpenRouterProvider(
        "openrouter",
        ProviderSettings(
            api_key="or-key",
            base_url="https://openrouter.ai/api/v1",
            extra={"http_referer": "https://app.test", "app_title": "Polychat"},
        ),
        http_transport=backend.transport,
    )
    h = chat_harness(provider="openrouter", model="openrouter/auto")
    await provider.get_chat_completion(
        h.history, CompletionOptions(provider="openrouter", model="openrouter/auto"), h.handler
    )
    headers = backend.requests[0].headers
    assert headers["http-referer"] == "https://app.test"  # nosec B101
    assert headers["x-title"] == "Polychat"  # nosec B101
    assert not provider.supports(Capability.IMAGE_GENERATION)  # nosec B101


@pytest.mark.asyncio
async def test_custom_endpoint_uses_versioned_base_url(recording_sleep, sse_body, chat_harness):
    backend = FakeBackend({
        ("POST", "/v1/chat/completions"): _stream_response(
            sse_body, [{"choices": [{"index": 0, "delta": {"content": "local"}}]}]
        ),
    })
    provider = CustomProvider(
        "my-llm",
        ProviderSettings(api_key="k", base_url="http://localhost:1234/"),
        http_transport=backend.transport,
    )
    h = chat_harness(provider="my-llm", model="llama")
    message = await provider.get_chat_completion(
        h.history, CompletionOptions(provider="my-llm", model="llama"), h.handler
    )
    assert message.text == "local"  # nosec B101
    assert str(backend.requests[0].url) == "http://localhost:1234/v1/chat/completions"  # nosec B101
    assert "stream_options" not in backend.body()  # nosec B101
    assert provider.name == "my-llm"  # nosec B101
