"""Composition root for providers: the provider registry."""
from __future__ import annotations

from .registry import ProviderRegistry, build_registry

__all__ = ["ProviderRegistry", "build_registry"]
