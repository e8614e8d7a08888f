"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `polychat_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode, RETRYABLE_CODES
from .provider_error import ProviderError
from .http_request_error import HttpRequestError
from .classification import classify_exception, is_cancellation

__all__ = [
    "ErrorCode",
    "RETRYABLE_CODES",
    "ProviderError",
    "HttpRequestError",
    "classify_exception",
    "is_cancellation",
]
