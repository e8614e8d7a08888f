"""Custom OpenAI-compatible endpoint adapter.

Used for self-hosted servers and for any registry id that is not a built-in
provider. Requests go to ``<base_url>/<api_version>`` (``api_version``
defaults to ``v1``); the display name comes from settings, falling back to the
provider id. Streaming requests omit ``stream_options`` since many
compatible servers reject it.
"""

from __future__ import annotations

from ..base.capabilities import Capability, map_model_capabilities
from ..base.openai_style_parts import BaseOpenAIStyleProvider
from ..config.defaults import CUSTOM_API_VERSION, CUSTOM_DEFAULT_BASE_URL

__all__ = ["CustomProvider"]


class CustomProvider(BaseOpenAIStyleProvider):
    default_base_url = CUSTOM_DEFAULT_BASE_URL
    include_usage = False
    lists_remote_models = True
    provider_capabilities = map_model_capabilities(tool_usage=True) | {Capability.CHAT_COMPLETION}
    default_model_capabilities = provider_capabilities

    def _api_base_url(self) -> str:
        version = (self.settings.api_version or CUSTOM_API_VERSION).strip("/")
        return f"{self.base_url}/{version}" if version else self.base_url
