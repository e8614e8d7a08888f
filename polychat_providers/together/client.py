"""Together.ai provider adapter.

OpenAI-compatible chat completions plus a remote catalog from ``GET
/models``. Together answers that endpoint with a bare JSON list whose entries
carry ``display_name``; the OpenAI-style ``{"data": [...]}`` envelope is
accepted as well.
"""

from __future__ import annotations

from typing import List, Mapping, Optional

from ..base.capabilities import Capability, map_model_capabilities
from ..base.models import ModelInfo
from ..base.openai_style_parts import BaseOpenAIStyleProvider
from ..config.defaults import TOGETHER_DEFAULT_BASE_URL

__all__ = ["TogetherProvider"]


class TogetherProvider(BaseOpenAIStyleProvider):
    default_name = "Together.ai"
    default_base_url = TOGETHER_DEFAULT_BASE_URL
    provider_capabilities = map_model_capabilities(tool_usage=True) | {
        Capability.CHAT_COMPLETION,
        Capability.EMBEDDING,
    }
    default_model_capabilities = map_model_capabilities(tool_usage=True) | {Capability.CHAT_COMPLETION}

    async def _fetch_remote_models(self) -> Optional[List[ModelInfo]]:
        body = await self.http.get_json("/models")
        entries = body.get("data") if isinstance(body, dict) else body
        return [
            self._listed_model({**entry, "name": entry.get("display_name") or entry.get("name")})
            for entry in entries or []
            if isinstance(entry, Mapping) and entry.get("id")
        ]
