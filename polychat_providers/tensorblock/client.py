"""TensorBlock Forge provider adapter.

Forge is an OpenAI-compatible gateway with a fixed catalog, so nothing beyond
the OpenAI-style base is needed: no remote model listing, and the gateway's
streaming responses are requested without ``stream_options``.
"""

from __future__ import annotations

from ..base.capabilities import Capability, map_model_capabilities
from ..base.openai_style_parts import BaseOpenAIStyleProvider
from ..config.defaults import TENSORBLOCK_DEFAULT_BASE_URL

__all__ = ["TensorBlockProvider"]


class TensorBlockProvider(BaseOpenAIStyleProvider):
    default_name = "TensorBlock"
    default_base_url = TENSORBLOCK_DEFAULT_BASE_URL
    include_usage = False
    provider_capabilities = map_model_capabilities() | {Capability.CHAT_COMPLETION}
    default_model_capabilities = provider_capabilities
