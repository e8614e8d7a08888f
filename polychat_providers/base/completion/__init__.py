"""Completion engine and the transport contract it drives."""

from .engine import run_chat_completion
from .message_format import normalize_messages, split_system
from .transport import (
    ChatTransport,
    CompletionResult,
    ToolInvocation,
    TransportMessage,
    TransportRequest,
)

__all__ = [
    "run_chat_completion",
    "normalize_messages",
    "split_system",
    "ChatTransport",
    "CompletionResult",
    "ToolInvocation",
    "TransportMessage",
    "TransportRequest",
]
