"""Gemini provider adapter (REST, no SDK).

Purpose:
- Chat completions through ``models/<model>:generateContent`` and streaming
  through ``models/<model>:streamGenerateContent?alt=sse``.
- Model listing through ``GET models``, keeping models that support
  ``generateContent``.

Authentication:
- The key travels in the ``key`` query parameter, installed as a request
  interceptor. URLs are redacted before they reach logs or error messages.
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, List, Mapping, Optional, cast

from ..base.cancellation import CancellationToken
from ..base.capabilities import Capability, map_model_capabilities
from ..base.completion import ChatTransport, CompletionResult, TransportRequest
from ..base.http import HttpRetryClient, iter_sse_data, query_key_auth
from ..base.models import ModelInfo
from ..base.provider_base import BaseChatProvider
from ..base.streaming.stream_parts import StreamPart
from ..config.defaults import GEMINI_API_VERSION, GEMINI_DEFAULT_BASE_URL
from .helpers import GeminiStreamTranslator, build_generate_body, parse_generate_response

__all__ = ["GeminiTransport", "GeminiProvider"]


class GeminiTransport:
    def __init__(self, client: HttpRetryClient) -> None:
        self._client = client

    @property
    def client(self) -> HttpRetryClient:
        return self._client

    async def complete(
        self, request: TransportRequest, cancellation_token: CancellationToken
    ) -> CompletionResult:
        body = await self._client.post_json(
            f"/models/{request.model}:generateContent",
            build_generate_body(request),
            cancellation_token=cancellation_token,
        )
        return parse_generate_response(body)

    async def stream(
        self, request: TransportRequest, cancellation_token: CancellationToken
    ) -> AsyncIterator[StreamPart]:
        translator = GeminiStreamTranslator()
        async with self._client.stream(
            "POST",
            f"/models/{request.model}:streamGenerateContent",
            json=build_generate_body(request),
            params={"alt": "sse"},
            cancellation_token=cancellation_token,
        ) as response:
            async for data in iter_sse_data(response, cancellation_token):
                for part in translator.feed(json.loads(data)):
                    yield part
        for part in translator.finish():
            yield part

    async def aclose(self) -> None:
        await self._client.aclose()


class GeminiProvider(BaseChatProvider):
    default_name = "Gemini"
    default_base_url = GEMINI_DEFAULT_BASE_URL
    provider_capabilities = map_model_capabilities(
        images=True, audio=True, object_generation=True, tool_usage=True
    ) | {Capability.CHAT_COMPLETION}
    default_model_capabilities = map_model_capabilities(images=True, tool_usage=True) | {
        Capability.CHAT_COMPLETION
    }

    @property
    def api_version(self) -> str:
        return (self.settings.api_version or GEMINI_API_VERSION).strip("/")

    def _build_transport(self) -> ChatTransport:
        client = self._http_client(f"{self.base_url}/{self.api_version}")
        client.add_request_interceptor(query_key_auth("key", self.api_key))
        return GeminiTransport(client)

    def _listed_model(self, entry: Mapping[str, Any]) -> ModelInfo:
        model_id = str(entry["name"]).split("/", 1)[-1]
        for known in self._models:
            if known.id == model_id:
                return known
        return ModelInfo(
            id=model_id,
            provider=self.id,
            name=entry.get("displayName"),
            capabilities=self.default_model_capabilities,
        )

    async def _fetch_remote_models(self) -> Optional[List[ModelInfo]]:
        body = await cast(GeminiTransport, self._transport).client.get_json("/models")
        return [
            self._listed_model(entry)
            for entry in body.get("models") or []
            if entry.get("name")
            and "generateContent" in (entry.get("supportedGenerationMethods") or [])
        ]
