from __future__ import annotations

import json

import httpx
import pytest

from polychat_providers.anthropic import AnthropicProvider
from polychat_providers.anthropic.helpers import to_anthropic_messages
from polychat_providers.base.completion import TransportMessage
from polychat_providers.base.dto import CompletionOptions, ProviderSettings
from polychat_providers.base.errors import ErrorCode, ProviderError
from polychat_providers.base.models import ContentPart, Message
from polychat_providers.base.resilience import RetryConfig
from polychat_providers.base.tools import ToolRegistry

MODEL = "claude-3-5-haiku-latest"


def _provider(handler, api_key: str = "ant-key") -> AnthropicProvider:
    return AnthropicProvider(
        "anthropic",
        ProviderSettings(api_key=api_key, base_url="https://api.anthropic.test", api_version="2023-06-01"),
        retry=RetryConfig(max_retries=0),
        http_transport=httpx.MockTransport(handler),
    )


def _message_start(input_tokens: int) -> dict:
    return {
        "message": {
            "id": "msg_1", "type": "message", "role": "assistant", "model": MODEL,
            "content": [], "stop_reason": None, "stop_sequence": None,
            "usage": {"input_tokens": input_tokens, "output_tokens": 1},
        }
    }


@pytest.mark.asyncio
async def test_stream_events_are_translated(sse_events, chat_harness):
    requests = []
    payload = sse_events([
        ("message_start", _message_start(12)),
        ("content_block_start", {"index": 0, "content_block": {"type": "text", "text": ""}}),
        ("content_block_delta", {"index": 0, "delta": {"type": "text_delta", "text": "Hel"}}),
        ("content_block_delta", {"index": 0, "delta": {"type": "text_delta", "text": "lo"}}),
        ("content_block_stop", {"index": 0}),
        ("content_block_start", {"index": 1, "content_block": {
            "type": "tool_use", "id": "toolu_1", "name": "search", "input": {}}}),
        ("content_block_delta", {"index": 1, "delta": {"type": "input_json_delta", "partial_json": '{"q": '}}),
        ("content_block_delta", {"index": 1, "delta": {"type": "input_json_delta", "partial_json": '"x"}'}}),
        ("content_block_stop", {"index": 1}),
        ("message_delta", {"delta": {"stop_reason": "tool_use", "stop_sequence": None},
                           "usage": {"output_tokens": 7}}),
        ("message_stop", {}),
    ])

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            content=payload,
            headers={
                "content-type": "text/event-stream",
                "anthropic-ratelimit-requests-remaining": "99",
            },
        )

    provider = _provider(handler)
    seen = []
    tools = ToolRegistry()
    tools.register_function("search", lambda args: seen.append(args) or "ok")
    h = chat_harness(provider="anthropic", model=MODEL)
    history = [Message.create("system", "Be terse."), *h.history]

    message = await provider.get_chat_completion(
        history, CompletionOptions(provider="anthropic", model=MODEL, tool_choice="auto"), h.handler, tools=tools
    )

    assert h.chunks == ["Hel", "Hello"]  # nosec B101
    assert message.text == "Hello"  # nosec B101
    assert message.tokens == 19  # nosec B101
    assert seen == [{"q": "x"}]  # nosec B101
    assert provider.get_rate_limit_info().remaining == 99  # nosec B101

    request = requests[0]
    assert request.url.path == "/v1/messages"  # nosec B101
    assert request.headers["x-api-key"] == "ant-key"  # nosec B101
    assert request.headers["anthropic-version"] == "2023-06-01"  # nosec B101
    body = json.loads(request.content)
    assert body["stream"] is True  # nosec B101
    assert body["system"] == "Be terse."  # nosec B101
    assert body["max_tokens"] == 4096  # nosec B101
    assert body["messages"] == [{"role": "user", "content": [{"type": "text", "text": "Hi"}]}]  # nosec B101
    assert body["tools"][0]["name"] == "search"  # nosec B101
    assert body["tool_choice"] == {"type": "auto"}  # nosec B101


@pytest.mark.asyncio
async def test_blocking_message(chat_harness):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "id": "msg_2", "type": "message", "role": "assistant", "model": MODEL,
            "content": [
                {"type": "text", "text": "Hello"},
                {"type": "tool_use", "id": "toolu_2", "name": "lookup", "input": {"id": 7}},
            ],
            "stop_reason": "tool_use", "stop_sequence": None,
            "usage": {"input_tokens": 3, "output_tokens": 4},
        })

    provider = _provider(handler)
    h = chat_harness(provider="anthropic", model=MODEL)
    message = await provider.get_chat_completion(
        h.history, CompletionOptions(provider="anthropic", model=MODEL, stream=False), h.handler
    )
    assert message.text == "Hello" and message.tokens == 7  # nosec B101
    # no executor registered: the call is announced and marked in progress only
    assert h.tool_updates == [  # nosec B101
        ("toolu_2", "called", None, None),
        ("toolu_2", "in_progress", None, None),
    ]


@pytest.mark.asyncio
async def test_sdk_errors_are_classified(chat_harness):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={
            "type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"},
        })

    provider = _provider(handler)
    h = chat_harness(provider="anthropic", model=MODEL)
    with pytest.raises(ProviderError) as ei:
        await provider.get_chat_completion(
            h.history, CompletionOptions(provider="anthropic", model=MODEL), h.handler
        )
    assert ei.value.code is ErrorCode.AUTH  # nosec B101
    assert ei.value.message.startswith(f"anthropic/{MODEL} chat completion failed:")  # nosec B101
    assert not ei.value.retryable  # nosec B101


@pytest.mark.asyncio
async def test_image_generation_is_unsupported():
    provider = _provider(lambda r: httpx.Response(500))
    with pytest.raises(ProviderError) as ei:
        await provider.get_image_generation("a cat")
    assert ei.value.code is ErrorCode.UNSUPPORTED  # nosec B101
    await provider.aclose()


def test_consecutive_roles_are_merged():
    image = ContentPart(type="image", data={"url": "https://img.test/a.png"})
    merged = to_anthropic_messages([
        TransportMessage(role="user", text="one"),
        TransportMessage(role="user", text="two", attachments=(image,)),
        TransportMessage(role="assistant", text="three"),
    ])
    assert [m["role"] for m in merged] == ["user", "assistant"]  # nosec B101
    assert merged[0]["content"] == [  # nosec B101
        {"type": "text", "text": "one"},
        {"type": "text", "text": "two"},
        {"type": "image", "source": {"type": "url", "url": "https://img.test/a.png"}},
    ]
