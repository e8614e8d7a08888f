"""Resilience helpers (retry policy)."""

from .retry import DEFAULT_RETRY_CONFIG, AttemptLogger, RetryConfig

__all__ = ["AttemptLogger", "RetryConfig", "DEFAULT_RETRY_CONFIG"]
