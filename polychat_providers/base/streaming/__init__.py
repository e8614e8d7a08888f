"""Streaming package: stream events, stream control handler and helpers."""

from .stream_controller import (
    ChunkCallback,
    FinishCallback,
    StreamControlHandler,
    ToolUpdateCallback,
)
from .stream_parts import (
    StreamFinish,
    StreamPart,
    TextDelta,
    ToolCallComplete,
    ToolCallDelta,
    ToolCallStreamingStart,
)
from .streaming_metrics import StreamMetrics
from .tool_call_accumulator import ToolCallAccumulator, parse_arguments

__all__ = [
    "StreamControlHandler",
    "ChunkCallback",
    "FinishCallback",
    "ToolUpdateCallback",
    "TextDelta",
    "ToolCallStreamingStart",
    "ToolCallDelta",
    "ToolCallComplete",
    "StreamFinish",
    "StreamPart",
    "StreamMetrics",
    "ToolCallAccumulator",
    "parse_arguments",
]
