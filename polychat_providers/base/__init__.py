"""
Providers Base Package

Exports provider-agnostic contracts, domain models, the completion engine and
the provider factory for use by the concrete adapters and by callers.

Layout:
- Interfaces: the ``ChatProvider`` contract
- Models: messages, conversations, catalog and usage records
- Streaming: stream events and the stream control handler
- HTTP: retry client, interceptors, SSE reader
- Factory: lazy creation of provider adapters by kind
"""

from .capabilities import Capability, map_model_capabilities, supports
from .cancellation import CancellationToken, CancelledError
from .completion import ChatTransport, run_chat_completion
from .dto import CompletionOptions, ImageGenerationOptions, ProviderSettings, ToolDefinition
from .errors import ErrorCode, HttpRequestError, ProviderError, classify_exception
from .factory import ProviderFactory, ProviderKind, UnknownProviderError
from .http import HttpRetryClient
from .interfaces import ChatProvider
from .models import (
    ContentPart,
    Conversation,
    Message,
    MessageTree,
    ModelInfo,
    RateLimitInfo,
    TokenUsage,
    ToolCall,
    ToolCallStatus,
)
from .provider_base import BaseChatProvider
from .resilience import RetryConfig
from .streaming import StreamControlHandler
from .timeouts import TimeoutConfig, get_timeout_config
from .tools import FunctionTool, ImageGenerationTool, Tool, ToolRegistry, TypedTool

__all__ = [
    # Capabilities
    "Capability",
    "map_model_capabilities",
    "supports",
    # Cancellation
    "CancellationToken",
    "CancelledError",
    # Completion
    "ChatTransport",
    "run_chat_completion",
    # DTOs
    "CompletionOptions",
    "ImageGenerationOptions",
    "ProviderSettings",
    "ToolDefinition",
    # Errors
    "ErrorCode",
    "HttpRequestError",
    "ProviderError",
    "classify_exception",
    # Factory
    "ProviderFactory",
    "ProviderKind",
    "UnknownProviderError",
    # HTTP
    "HttpRetryClient",
    # Interfaces
    "ChatProvider",
    "BaseChatProvider",
    # Models
    "ContentPart",
    "Conversation",
    "Message",
    "MessageTree",
    "ModelInfo",
    "RateLimitInfo",
    "TokenUsage",
    "ToolCall",
    "ToolCallStatus",
    # Resilience & timeouts
    "RetryConfig",
    "TimeoutConfig",
    "get_timeout_config",
    # Streaming
    "StreamControlHandler",
    # Tools
    "Tool",
    "TypedTool",
    "FunctionTool",
    "ImageGenerationTool",
    "ToolRegistry",
]
