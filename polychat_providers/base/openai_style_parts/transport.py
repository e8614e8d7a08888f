"""OpenAIStyleTransport (single-class module).

``ChatTransport`` for any backend speaking the OpenAI Chat Completions wire
format (OpenAI, OpenRouter, self-hosted endpoints). All I/O goes through an
injected :class:`HttpRetryClient`, so retries, timeouts, authentication and
rate-limit tracking are configured by the owning provider.
"""

from __future__ import annotations

import json
from typing import AsyncIterator

from ..cancellation import CancellationToken
from ..completion.transport import CompletionResult, TransportRequest
from ..http import HttpRetryClient, iter_sse_data
from ..streaming.stream_parts import StreamPart
from .nonstream_helpers import parse_completion
from .stream_translator import OpenAIStreamTranslator
from .style_helpers import build_chat_params


class OpenAIStyleTransport:
    def __init__(
        self,
        client: HttpRetryClient,
        *,
        chat_path: str = "/chat/completions",
        include_usage: bool = True,
    ) -> None:
        self._client = client
        self._chat_path = chat_path
        self._include_usage = include_usage

    @property
    def client(self) -> HttpRetryClient:
        return self._client

    async def complete(
        self, request: TransportRequest, cancellation_token: CancellationToken
    ) -> CompletionResult:
        body = await self._client.post_json(
            self._chat_path,
            build_chat_params(request, stream=False),
            cancellation_token=cancellation_token,
        )
        return parse_completion(body)

    async def stream(
        self, request: TransportRequest, cancellation_token: CancellationToken
    ) -> AsyncIterator[StreamPart]:
        translator = OpenAIStreamTranslator()
        params = build_chat_params(request, stream=True, include_usage=self._include_usage)
        async with self._client.stream(
            "POST", self._chat_path, json=params, cancellation_token=cancellation_token
        ) as response:
            async for data in iter_sse_data(response, cancellation_token):
                for part in translator.feed(json.loads(data)):
                    yield part
        for part in translator.finish():
            yield part

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["OpenAIStyleTransport"]
