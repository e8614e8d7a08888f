"""HTTP layer: retry client, interceptors and SSE reader."""

from .client import HttpRetryClient
from .interceptors import (
    RateLimitTracker,
    RequestInterceptor,
    ResponseInterceptor,
    bearer_auth,
    header_auth,
    query_key_auth,
    static_headers,
)
from .sse import DONE_SENTINEL, iter_sse_data

__all__ = [
    "HttpRetryClient",
    "RequestInterceptor",
    "ResponseInterceptor",
    "RateLimitTracker",
    "bearer_auth",
    "header_auth",
    "query_key_auth",
    "static_headers",
    "iter_sse_data",
    "DONE_SENTINEL",
]
