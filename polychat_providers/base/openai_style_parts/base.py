"""BaseOpenAIStyleProvider implementation.

Purpose:
- Reusable base for providers exposing an OpenAI-compatible Chat Completions
  endpoint (OpenAI, OpenRouter, self-hosted servers).

External dependencies:
- ``httpx`` through :class:`HttpRetryClient`; no vendor SDK is required.

Authentication:
- Bearer header installed as a request interceptor when the transport is
  built; ``update_api_key`` builds a fresh client with the new key.

Model listing:
- ``GET /models`` when ``lists_remote_models`` is set. Configured catalog
  entries keep their capabilities; other listed ids get the provider default.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Mapping, Optional, cast

from ..completion.transport import ChatTransport
from ..http import HttpRetryClient, bearer_auth, static_headers
from ..models import ModelInfo
from ..provider_base import BaseChatProvider
from .transport import OpenAIStyleTransport


class BaseOpenAIStyleProvider(BaseChatProvider):
    """Provider over an OpenAI-compatible REST API."""

    include_usage: ClassVar[bool] = True
    lists_remote_models: ClassVar[bool] = False

    def _api_base_url(self) -> str:
        return self.base_url

    def _extra_headers(self) -> Dict[str, str]:
        """Fixed headers added to every request (empty values are skipped)."""
        return {}

    def _build_transport(self) -> ChatTransport:
        client = self._http_client(self._api_base_url())
        client.add_request_interceptor(bearer_auth(self.api_key))
        extra = self._extra_headers()
        if extra:
            client.add_request_interceptor(static_headers(extra))
        return OpenAIStyleTransport(client, include_usage=self.include_usage)

    @property
    def http(self) -> HttpRetryClient:
        """HTTP client of the current transport."""
        return cast(OpenAIStyleTransport, self._transport).client

    def _accept_model(self, model_id: str) -> bool:
        return True

    def _listed_model(self, entry: Mapping[str, Any]) -> ModelInfo:
        model_id = str(entry["id"])
        for known in self._models:
            if known.id == model_id:
                return known
        return ModelInfo(
            id=model_id,
            provider=self.id,
            name=entry.get("name"),
            capabilities=self.default_model_capabilities,
        )

    async def _fetch_remote_models(self) -> Optional[List[ModelInfo]]:
        if not self.lists_remote_models:
            return None
        body = await self.http.get_json("/models")
        entries = (body.get("data") or []) if isinstance(body, dict) else []
        return [
            self._listed_model(entry)
            for entry in entries
            if entry.get("id") and self._accept_model(str(entry["id"]))
        ]


__all__ = ["BaseOpenAIStyleProvider"]
