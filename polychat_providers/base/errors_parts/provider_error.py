"""
Structured provider error exception type.

Wraps transport and SDK failures with a normalized `ErrorCode` so callers can
branch on the failure category without inspecting provider-specific types.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for display.
        provider: Provider id where the error originated (e.g., ``"OpenAI"``).
        model: Optional model id associated with the failure.
        retryable: Hint for upstream logic (the HTTP client has already
            exhausted its own retries by the time this surfaces).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


__all__ = ["ProviderError"]
