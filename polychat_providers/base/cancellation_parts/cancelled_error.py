"""Cancellation error type.

Defines the public ``CancelledError`` raised when a request observes an abort.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    Distinguishes "user stopped generation" from genuine failures: the
    completion engine re-raises it untouched and skips error logging, and the
    retry client never retries it.
    """


__all__ = ["CancelledError"]
