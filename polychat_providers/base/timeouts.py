"""Timeout configuration for the HTTP layer and providers.

TimeoutConfig
    Normalized timeout values in seconds. ``http_timeout_seconds`` is the
    generic per-request default of the retry client; provider transports use
    ``provider_timeout_seconds``. Timeouts surface as
    ``httpx.TimeoutException`` and are retried like other network errors.

get_timeout_config()
    Returns a process-cached configuration parsed from the environment on
    first use. Supported variables (all optional, positive floats):
        POLYCHAT_TIMEOUT_HTTP_SECONDS
        POLYCHAT_TIMEOUT_PROVIDER_SECONDS
    The cache is refreshed when either variable changes.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_HTTP_TIMEOUT, DEFAULT_PROVIDER_TIMEOUT


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds)."""

    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT
    provider_timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(
        [
            os.getenv("POLYCHAT_TIMEOUT_HTTP_SECONDS", ""),
            os.getenv("POLYCHAT_TIMEOUT_PROVIDER_SECONDS", ""),
        ]
    )
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float("POLYCHAT_TIMEOUT_HTTP_SECONDS", DEFAULT_HTTP_TIMEOUT),
        provider_timeout_seconds=_parse_env_float(
            "POLYCHAT_TIMEOUT_PROVIDER_SECONDS", DEFAULT_PROVIDER_TIMEOUT
        ),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
