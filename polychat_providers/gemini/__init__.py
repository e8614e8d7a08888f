"""Gemini provider package."""

from .client import GeminiProvider, GeminiTransport

__all__ = ["GeminiProvider", "GeminiTransport"]
