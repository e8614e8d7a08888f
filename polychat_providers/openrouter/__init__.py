"""OpenRouter provider package."""

from .client import OpenRouterProvider

__all__ = ["OpenRouterProvider"]
