"""
Provider-agnostic interfaces for the providers layer.

Re-exports the Protocols under ``polychat_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import ChatProvider

__all__ = ["ChatProvider"]
