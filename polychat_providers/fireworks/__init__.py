"""Fireworks.ai provider package."""

from .client import FireworksProvider

__all__ = ["FireworksProvider"]
