"""
OpenAI provider package.

Exports:
- OpenAIProvider: ChatProvider adapter for the OpenAI API
"""

from .client import OpenAIProvider

__all__ = ["OpenAIProvider"]
