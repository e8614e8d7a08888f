"""Base shared constants for provider adapters.

Central location to avoid scattering magic strings and default numbers.
"""
from __future__ import annotations

# Retry policy defaults (milliseconds)
DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY_MS = 1000
DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_MAX_DELAY_MS = 10000
RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

# Default HTTP timeouts (seconds)
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_PROVIDER_TIMEOUT = 60.0

# In-progress assistant messages carry ids with this prefix
STREAMING_MESSAGE_PREFIX = "streaming-"

# preferIndex value meaning "no canonical child chosen yet"
PREFER_INDEX_UNSET = -1

# Built-in tool names
IMAGE_GENERATION_TOOL_NAME = "generate_image"

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_INITIAL_DELAY_MS",
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_MAX_DELAY_MS",
    "RETRYABLE_STATUS_CODES",
    "DEFAULT_HTTP_TIMEOUT",
    "DEFAULT_PROVIDER_TIMEOUT",
    "STREAMING_MESSAGE_PREFIX",
    "PREFER_INDEX_UNSET",
    "IMAGE_GENERATION_TOOL_NAME",
]
