"""Unified provider error taxonomy public surface.

Re-exports the implementations under ``polychat_providers.base.errors_parts``
so callers have one stable import path.
"""

from .errors_parts.error_code import ErrorCode, RETRYABLE_CODES
from .errors_parts.provider_error import ProviderError
from .errors_parts.http_request_error import HttpRequestError
from .errors_parts.classification import classify_exception, is_cancellation

__all__ = [
    "ErrorCode",
    "RETRYABLE_CODES",
    "ProviderError",
    "HttpRequestError",
    "classify_exception",
    "is_cancellation",
]
