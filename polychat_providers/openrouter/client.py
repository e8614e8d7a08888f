"""OpenRouter provider adapter.

OpenRouter speaks the OpenAI Chat Completions format, so this is a thin
subclass of the OpenAI-style base. Optional attribution headers are read from
``ProviderSettings.extra``:

- ``http_referer`` → ``HTTP-Referer``
- ``app_title`` → ``X-Title``

Model capabilities come from the configured catalog only.
"""

from __future__ import annotations

from typing import Dict

from ..base.capabilities import Capability, map_model_capabilities
from ..base.openai_style_parts import BaseOpenAIStyleProvider
from ..config.defaults import OPENROUTER_DEFAULT_BASE_URL

__all__ = ["OpenRouterProvider"]


class OpenRouterProvider(BaseOpenAIStyleProvider):
    default_name = "OpenRouter"
    default_base_url = OPENROUTER_DEFAULT_BASE_URL
    provider_capabilities = map_model_capabilities(
        images=True, object_generation=True, tool_usage=True
    ) | {Capability.CHAT_COMPLETION}

    def _extra_headers(self) -> Dict[str, str]:
        extra = self.settings.extra
        return {
            "HTTP-Referer": str(extra.get("http_referer") or ""),
            "X-Title": str(extra.get("app_title") or ""),
        }
