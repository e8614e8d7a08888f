"""Anthropic provider adapter.

Uses the official ``anthropic`` SDK (``AsyncAnthropic``) Messages API:
``messages.create`` for blocking requests and ``messages.create(stream=True)``
for streaming, both through ``with_raw_response`` so rate-limit headers
reach the provider's tracker.

Retry and timeout:
- The SDK performs its own retries; ``max_retries`` is taken from the
  provider's :class:`RetryConfig` and the timeout from the provider timeout.
- Tests inject an ``httpx`` transport which is wrapped in the SDK's
  ``http_client``.

The model catalog is the configured one; Anthropic has no listing call here.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable, Mapping, Optional

import anthropic
import httpx

from ..base.cancellation import CancellationToken
from ..base.capabilities import Capability, map_model_capabilities
from ..base.completion import ChatTransport, CompletionResult, TransportRequest
from ..base.streaming.stream_parts import StreamPart
from ..base.provider_base import BaseChatProvider
from ..config.defaults import ANTHROPIC_DEFAULT_BASE_URL
from .helpers import build_message_params, parse_message
from .stream_helpers import AnthropicStreamTranslator

__all__ = ["AnthropicTransport", "AnthropicProvider"]

HeaderSink = Callable[[Mapping[str, str]], None]


class AnthropicTransport:
    def __init__(self, client: anthropic.AsyncAnthropic, *, on_headers: Optional[HeaderSink] = None) -> None:
        self._client = client
        self._on_headers = on_headers

    def _observe(self, raw: Any) -> None:
        if self._on_headers is not None:
            self._on_headers(raw.headers)

    async def complete(
        self, request: TransportRequest, cancellation_token: CancellationToken
    ) -> CompletionResult:
        cancellation_token.raise_if_cancelled()
        raw = await self._client.messages.with_raw_response.create(**build_message_params(request))
        self._observe(raw)
        return parse_message(raw.parse())

    async def stream(
        self, request: TransportRequest, cancellation_token: CancellationToken
    ) -> AsyncIterator[StreamPart]:
        cancellation_token.raise_if_cancelled()
        raw = await self._client.messages.with_raw_response.create(
            **build_message_params(request), stream=True
        )
        self._observe(raw)
        translator = AnthropicStreamTranslator()
        events = raw.parse()
        try:
            async for event in events:
                cancellation_token.raise_if_cancelled()
                for part in translator.feed(event):
                    yield part
        finally:
            await events.close()
        for part in translator.finish():
            yield part

    async def aclose(self) -> None:
        await self._client.close()


class AnthropicProvider(BaseChatProvider):
    default_name = "Anthropic"
    default_base_url = ANTHROPIC_DEFAULT_BASE_URL
    provider_capabilities = map_model_capabilities(images=True, tool_usage=True) | {
        Capability.CHAT_COMPLETION,
        Capability.REASONING,
    }
    default_model_capabilities = map_model_capabilities(tool_usage=True) | {Capability.CHAT_COMPLETION}

    def _build_transport(self) -> ChatTransport:
        headers = dict(self.settings.headers)
        if self.settings.api_version:
            headers["anthropic-version"] = self.settings.api_version
        http_client = None
        if self._http_transport is not None:
            http_client = httpx.AsyncClient(transport=self._http_transport, timeout=self.timeout)
        client = anthropic.AsyncAnthropic(
            api_key=self.api_key,
            base_url=self.base_url,
            max_retries=self._retry.max_retries,
            timeout=self.timeout,
            default_headers=headers or None,
            http_client=http_client,
        )
        return AnthropicTransport(client, on_headers=self._rate_limits.update_from_headers)
