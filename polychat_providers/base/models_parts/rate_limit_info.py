"""Advisory rate-limit snapshot parsed from response headers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RateLimitInfo:
    """Request quota as last reported by the backend.

    Attributes:
        limit: Total requests allowed in the window.
        remaining: Requests left in the window.
        reset: Reset marker exactly as sent (duration like ``"6m0s"`` or an
            RFC 3339 timestamp, depending on the backend).
    """

    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset: Optional[str] = None


__all__ = ["RateLimitInfo"]
