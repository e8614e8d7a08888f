"""Retry policy shared by the HTTP retry client.

``RetryConfig`` owns the backoff schedule and the retry predicate:

* delay before retry ``n + 1`` (``n`` is the 0-based failed attempt index) is
  ``min(initial_delay_ms * backoff_factor ** n, max_delay_ms)``;
* a failure is retryable when no response was received (network error or
  timeout) or when the response status is in ``retryable_statuses``.

An optional ``attempt_logger`` is notified after every attempt.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, Optional, Protocol

import httpx

from ..cancellation import CancelledError
from ..constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    RETRYABLE_STATUS_CODES,
)


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay_ms: float | None,
        error: BaseException | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    max_delay_ms: float = DEFAULT_MAX_DELAY_MS
    retryable_statuses: FrozenSet[int] = field(default=RETRYABLE_STATUS_CODES)
    attempt_logger: Optional[AttemptLogger] = None

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_ms(self, attempt: int) -> float:
        """Delay before re-issuing after failed attempt ``attempt`` (0-based)."""
        return min(self.initial_delay_ms * self.backoff_factor**attempt, self.max_delay_ms)

    def delays(self) -> Iterator[float]:
        for attempt in range(self.max_retries):
            yield self.delay_ms(attempt)

    def is_retryable(self, exc: BaseException) -> bool:
        """Return True when ``exc`` is a transient failure worth retrying."""
        if isinstance(exc, CancelledError):
            return False
        if isinstance(exc, httpx.HTTPStatusError):
            return exc.response.status_code in self.retryable_statuses
        return isinstance(exc, httpx.TransportError)


DEFAULT_RETRY_CONFIG = RetryConfig()


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
]
