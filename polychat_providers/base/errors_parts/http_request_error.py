"""
Enriched HTTP failure raised by the retry client.

The retry client converts the last transport or status error into this type
once retries are exhausted (or immediately for terminal failures). The message
follows ``API Error (<status> <status text>): <detail> [<METHOD> <url>]`` and
the original exception stays reachable through ``original`` and
``__cause__``.
"""
from __future__ import annotations

from typing import Optional


class HttpRequestError(Exception):
    """HTTP failure carrying status, request context and the original error."""

    def __init__(
        self,
        *,
        status: Optional[int],
        status_text: str,
        detail: str,
        method: str,
        url: str,
        attempts: int = 1,
        original: Optional[BaseException] = None,
    ) -> None:
        self.status = status
        self.status_text = status_text
        self.detail = detail
        self.method = method.upper()
        self.url = url
        self.attempts = attempts
        self.original = original
        status_label = f"{status} {status_text}" if status is not None else status_text
        super().__init__(f"API Error ({status_label}): {detail} [{self.method} {url}]")

    @property
    def status_code(self) -> Optional[int]:
        """Alias used by :func:`classify_exception` status extraction."""
        return self.status


__all__ = ["HttpRequestError"]
