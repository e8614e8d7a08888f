"""Normalized stream events produced by transports.

Every transport translates its wire format into this small vocabulary, and
the completion engine consumes nothing else. Events must be processed in
arrival order because deltas and completions reference ids introduced by an
earlier start event.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..models import TokenUsage


@dataclass(frozen=True)
class TextDelta:
    text: str


@dataclass(frozen=True)
class ToolCallStreamingStart:
    tool_call_id: str
    tool_name: str


@dataclass(frozen=True)
class ToolCallDelta:
    tool_call_id: str
    args_text_delta: str


@dataclass(frozen=True)
class ToolCallComplete:
    """Complete tool call.

    ``args`` is ``None`` when the transport did not parse the arguments; the
    engine then parses the text it accumulated from the deltas.
    """

    tool_call_id: str
    tool_name: str
    args: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class StreamFinish:
    usage: Optional[TokenUsage] = None
    finish_reason: Optional[str] = None


StreamPart = Union[TextDelta, ToolCallStreamingStart, ToolCallDelta, ToolCallComplete, StreamFinish]


__all__ = [
    "TextDelta",
    "ToolCallStreamingStart",
    "ToolCallDelta",
    "ToolCallComplete",
    "StreamFinish",
    "StreamPart",
]
