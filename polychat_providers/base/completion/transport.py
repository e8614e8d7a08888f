"""Transport contract between the completion engine and a backend.

A transport turns a :class:`TransportRequest` into either one
:class:`CompletionResult` (blocking mode) or an async iterator of stream
parts (streaming mode). Transports own the wire format, authentication and
SDK/HTTP details; the engine owns ordering, tool dispatch and callbacks.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from ..cancellation import CancellationToken
from ..dto.completion_options import CompletionOptions, ToolDefinition
from ..models import ContentPart, TokenUsage
from ..streaming.stream_parts import StreamPart


@dataclass(frozen=True)
class TransportMessage:
    """History entry reduced to role, text and non-text attachments."""

    role: str
    text: str
    attachments: Tuple[ContentPart, ...] = ()


@dataclass(frozen=True)
class TransportRequest:
    model: str
    messages: List[TransportMessage]
    options: CompletionOptions
    tools: List[ToolDefinition] = field(default_factory=list)

    @property
    def tool_choice(self) -> Optional[str]:
        return self.options.tool_choice if self.tools else None


@dataclass(frozen=True)
class ToolInvocation:
    """A complete tool call from a blocking response.

    ``argument_error`` is set when the backend sent arguments that are not a
    JSON object; ``arguments`` is then empty and the call must not run.
    """

    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    argument_error: Optional[str] = None


@dataclass(frozen=True)
class CompletionResult:
    text: str
    usage: Optional[TokenUsage] = None
    tool_calls: List[ToolInvocation] = field(default_factory=list)
    finish_reason: Optional[str] = None


@runtime_checkable
class ChatTransport(Protocol):
    async def complete(
        self, request: TransportRequest, cancellation_token: CancellationToken
    ) -> CompletionResult: ...

    def stream(
        self, request: TransportRequest, cancellation_token: CancellationToken
    ) -> AsyncIterator[StreamPart]: ...

    async def aclose(self) -> None: ...


__all__ = [
    "TransportMessage",
    "TransportRequest",
    "ToolInvocation",
    "CompletionResult",
    "ChatTransport",
]
