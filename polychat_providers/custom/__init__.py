"""Custom OpenAI-compatible provider package."""

from .client import CustomProvider

__all__ = ["CustomProvider"]
