"""OpenAI provider adapter built on BaseOpenAIStyleProvider.

Chat completions, streaming and tool calls are inherited from the shared
OpenAI-style base. This adapter adds:
- the ``OpenAI-Organization`` header when an organization is configured,
- model listing from ``GET /models`` filtered to chat models,
- image generation through ``POST /images/generations``.
"""

from __future__ import annotations

from typing import Dict, List

from ..base.capabilities import Capability, map_model_capabilities
from ..base.dto.image_generation import ImageGenerationOptions
from ..base.openai_style_parts import BaseOpenAIStyleProvider
from ..config.defaults import OPENAI_DEFAULT_BASE_URL, OPENAI_DEFAULT_IMAGE_MODEL

__all__ = ["OpenAIProvider"]

_CHAT_PREFIXES = ("gpt-", "chatgpt-", "o1", "o3", "o4")
_NON_CHAT_MARKERS = ("instruct", "realtime", "audio", "tts", "transcribe", "image", "embedding")


class OpenAIProvider(BaseOpenAIStyleProvider):
    """OpenAI adapter; the only built-in provider with image generation."""

    default_name = "OpenAI"
    default_base_url = OPENAI_DEFAULT_BASE_URL
    lists_remote_models = True
    provider_capabilities = map_model_capabilities(
        images=True, audio=True, object_generation=True, tool_usage=True
    ) | {Capability.CHAT_COMPLETION, Capability.IMAGE_GENERATION, Capability.EMBEDDING}
    default_model_capabilities = map_model_capabilities(
        images=True, object_generation=True, tool_usage=True
    ) | {Capability.CHAT_COMPLETION}

    def _extra_headers(self) -> Dict[str, str]:
        return {"OpenAI-Organization": self.settings.organization or ""}

    def _accept_model(self, model_id: str) -> bool:
        lowered = model_id.lower()
        return lowered.startswith(_CHAT_PREFIXES) and not any(m in lowered for m in _NON_CHAT_MARKERS)

    async def _generate_images(self, prompt: str, options: ImageGenerationOptions) -> List[str]:
        body = await self.http.post_json(
            "/images/generations",
            {
                "model": options.model or OPENAI_DEFAULT_IMAGE_MODEL,
                "prompt": prompt,
                "n": options.n,
                "size": options.size,
                "quality": options.quality,
                "style": options.style,
                "response_format": options.response_format,
            },
        )
        return [
            item.get("url") or f"data:image/png;base64,{item.get('b64_json', '')}"
            for item in body.get("data") or []
        ]
