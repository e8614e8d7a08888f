"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` is the abort signal a stream control handler exposes to
transports; ``CancelledError`` is raised by operations that observe it.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
