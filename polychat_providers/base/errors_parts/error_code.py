"""
Normalized provider error codes (taxonomy).

Defines the `ErrorCode` enumeration shared by the HTTP retry client, the
completion engine and every provider. Values are lowercase snake_case and are
part of the structured logging contract.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    CONFIGURATION = "configuration"
    TOOL_EXECUTION = "tool_execution"
    UNKNOWN = "unknown"


RETRYABLE_CODES = frozenset(
    {
        ErrorCode.TRANSIENT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.TIMEOUT,
        ErrorCode.SERVER_ERROR,
        ErrorCode.UNAVAILABLE,
    }
)


__all__ = ["ErrorCode", "RETRYABLE_CODES"]
