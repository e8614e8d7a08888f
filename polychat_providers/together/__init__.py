"""Together.ai provider package."""

from .client import TogetherProvider

__all__ = ["TogetherProvider"]
