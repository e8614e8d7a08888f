"""Request and response interceptors for :class:`HttpRetryClient`.

Request interceptors receive the built ``httpx.Request`` before each attempt
and may modify it in place (or return a replacement). Response interceptors
observe every received response, including error responses, before status
handling. Authentication and rate-limit header parsing are both expressed as
interceptors so providers compose them without touching the client core.
"""
from __future__ import annotations

from typing import Callable, Mapping, Optional

import httpx

from ..models import RateLimitInfo

RequestInterceptor = Callable[[httpx.Request], Optional[httpx.Request]]
ResponseInterceptor = Callable[[httpx.Response], None]


def bearer_auth(api_key: str) -> RequestInterceptor:
    """``Authorization: Bearer <key>`` (OpenAI-compatible backends)."""

    def _apply(request: httpx.Request) -> httpx.Request:
        request.headers["Authorization"] = f"Bearer {api_key}"
        return request

    return _apply


def header_auth(header: str, value: str) -> RequestInterceptor:
    """Credential carried in a custom header (e.g. ``x-api-key``)."""

    def _apply(request: httpx.Request) -> httpx.Request:
        request.headers[header] = value
        return request

    return _apply


def query_key_auth(param: str, api_key: str) -> RequestInterceptor:
    """Credential carried in the query string (Gemini ``?key=``)."""

    def _apply(request: httpx.Request) -> httpx.Request:
        request.url = request.url.copy_merge_params({param: api_key})
        return request

    return _apply


def static_headers(headers: Mapping[str, str]) -> RequestInterceptor:
    """Add fixed headers (organization, referer, title...), skipping empty values."""
    fixed = {k: v for k, v in headers.items() if v}

    def _apply(request: httpx.Request) -> httpx.Request:
        request.headers.update(fixed)
        return request

    return _apply


def _int_header(headers: httpx.Headers, *names: str) -> Optional[int]:
    for name in names:
        raw = headers.get(name)
        if raw is None:
            continue
        try:
            return int(float(raw))
        except ValueError:
            continue
    return None


def _str_header(headers: httpx.Headers, *names: str) -> Optional[str]:
    for name in names:
        raw = headers.get(name)
        if raw:
            return raw
    return None


class RateLimitTracker:
    """Response interceptor keeping the latest :class:`RateLimitInfo`.

    Understands OpenAI-style ``x-ratelimit-*-requests``, Anthropic-style
    ``anthropic-ratelimit-requests-*`` and plain ``x-ratelimit-*`` headers.
    Responses without any of them leave the previous snapshot in place. The
    information is advisory and never blocks a request.
    """

    def __init__(self) -> None:
        self._info: Optional[RateLimitInfo] = None

    @property
    def info(self) -> Optional[RateLimitInfo]:
        return self._info

    def __call__(self, response: httpx.Response) -> None:
        headers = response.headers
        limit = _int_header(
            headers,
            "x-ratelimit-limit-requests",
            "anthropic-ratelimit-requests-limit",
            "x-ratelimit-limit",
        )
        remaining = _int_header(
            headers,
            "x-ratelimit-remaining-requests",
            "anthropic-ratelimit-requests-remaining",
            "x-ratelimit-remaining",
        )
        reset = _str_header(
            headers,
            "x-ratelimit-reset-requests",
            "anthropic-ratelimit-requests-reset",
            "x-ratelimit-reset",
        )
        if limit is None and remaining is None and reset is None:
            return
        self._info = RateLimitInfo(limit=limit, remaining=remaining, reset=reset)

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        """Parse a bare header mapping (used by SDK-based transports)."""
        self(httpx.Response(200, headers=dict(headers)))


__all__ = [
    "RequestInterceptor",
    "ResponseInterceptor",
    "bearer_auth",
    "header_auth",
    "query_key_auth",
    "static_headers",
    "RateLimitTracker",
]
