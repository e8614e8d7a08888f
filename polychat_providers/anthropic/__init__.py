"""Anthropic provider package."""

from .client import AnthropicProvider, AnthropicTransport

__all__ = ["AnthropicProvider", "AnthropicTransport"]
