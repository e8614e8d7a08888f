"""Fireworks.ai provider adapter.

Fireworks serves an OpenAI-compatible inference API. Models are addressed by
their account path (``accounts/fireworks/models/<name>``) and come from the
configured catalog; capabilities are the chat baseline for every model.
"""

from __future__ import annotations

from ..base.capabilities import Capability, map_model_capabilities
from ..base.openai_style_parts import BaseOpenAIStyleProvider
from ..config.defaults import FIREWORKS_DEFAULT_BASE_URL

__all__ = ["FireworksProvider"]


class FireworksProvider(BaseOpenAIStyleProvider):
    default_name = "Fireworks.ai"
    default_base_url = FIREWORKS_DEFAULT_BASE_URL
    provider_capabilities = map_model_capabilities() | {Capability.CHAT_COMPLETION}
    default_model_capabilities = provider_capabilities
