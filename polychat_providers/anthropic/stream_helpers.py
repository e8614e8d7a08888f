"""Anthropic streaming helpers.

Purpose:
- Map raw Messages API stream events to stream parts.

Event mapping:
- ``message_start``: prompt token count.
- ``content_block_start`` with a ``tool_use`` block: ``ToolCallStreamingStart``;
  the block index is remembered so deltas and the stop event find the call.
- ``content_block_delta``: ``text_delta`` → ``TextDelta``;
  ``input_json_delta`` → ``ToolCallDelta``.
- ``content_block_stop`` for a tool block: ``ToolCallComplete`` without
  parsed arguments (the engine parses the accumulated JSON).
- ``message_delta``: completion token count and stop reason.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..base.models import TokenUsage
from ..base.streaming.stream_parts import (
    StreamFinish,
    StreamPart,
    TextDelta,
    ToolCallComplete,
    ToolCallDelta,
    ToolCallStreamingStart,
)


class AnthropicStreamTranslator:
    def __init__(self) -> None:
        self._tool_blocks: Dict[int, Tuple[str, str]] = {}
        self._input_tokens: Optional[int] = None
        self._output_tokens: Optional[int] = None
        self._stop_reason: Optional[str] = None

    def feed(self, event: Any) -> List[StreamPart]:
        kind = getattr(event, "type", None)
        if kind == "message_start":
            usage = getattr(event.message, "usage", None)
            if usage is not None:
                self._input_tokens = getattr(usage, "input_tokens", None)
                self._output_tokens = getattr(usage, "output_tokens", None)
            return []
        if kind == "content_block_start":
            block = event.content_block
            if block.type == "tool_use":
                self._tool_blocks[event.index] = (block.id, block.name)
                return [ToolCallStreamingStart(block.id, block.name)]
            if block.type == "text" and getattr(block, "text", ""):
                return [TextDelta(block.text)]
            return []
        if kind == "content_block_delta":
            delta = event.delta
            if delta.type == "text_delta" and delta.text:
                return [TextDelta(delta.text)]
            if delta.type == "input_json_delta" and event.index in self._tool_blocks and delta.partial_json:
                return [ToolCallDelta(self._tool_blocks[event.index][0], delta.partial_json)]
            return []
        if kind == "content_block_stop":
            call = self._tool_blocks.pop(event.index, None)
            return [ToolCallComplete(call[0], call[1])] if call else []
        if kind == "message_delta":
            output = getattr(getattr(event, "usage", None), "output_tokens", None)
            if output is not None:
                self._output_tokens = output
            self._stop_reason = getattr(event.delta, "stop_reason", None) or self._stop_reason
        return []

    def finish(self) -> List[StreamPart]:
        parts: List[StreamPart] = [
            ToolCallComplete(call_id, name) for _, (call_id, name) in sorted(self._tool_blocks.items())
        ]
        self._tool_blocks.clear()
        usage = None
        if self._input_tokens is not None or self._output_tokens is not None:
            usage = TokenUsage.from_counts(self._input_tokens, self._output_tokens)
        parts.append(StreamFinish(usage=usage, finish_reason=self._stop_reason))
        return parts


__all__ = ["AnthropicStreamTranslator"]
