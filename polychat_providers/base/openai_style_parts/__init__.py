"""Shared building blocks for OpenAI-compatible transports.

Re-exports provide a stable import surface for the concrete providers.
"""

from .nonstream_helpers import parse_completion
from .stream_translator import OpenAIStreamTranslator, usage_from_openai
from .style_helpers import (
    build_chat_params,
    to_openai_content,
    to_openai_messages,
    to_openai_tools,
    tool_choice_param,
)
from .transport import OpenAIStyleTransport
from .base import BaseOpenAIStyleProvider

__all__ = [
    "BaseOpenAIStyleProvider",
    "OpenAIStyleTransport",
    "OpenAIStreamTranslator",
    "usage_from_openai",
    "parse_completion",
    "build_chat_params",
    "to_openai_content",
    "to_openai_messages",
    "to_openai_tools",
    "tool_choice_param",
]
