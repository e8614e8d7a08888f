"""OpenAIStreamTranslator (single-class module).

Translates decoded Chat Completions stream chunks into stream parts.
OpenAI-style backends key streamed tool-call fragments by ``index``; only the
first fragment of a call carries its ``id`` and ``name``. The translator maps
each index to its id so later fragments become ``ToolCallDelta`` events for
the right call, and closes every open call with ``ToolCallComplete`` when a
choice reports ``finish_reason`` (or when the stream ends).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..models import TokenUsage
from ..streaming.stream_parts import (
    StreamFinish,
    StreamPart,
    TextDelta,
    ToolCallComplete,
    ToolCallDelta,
    ToolCallStreamingStart,
)


def usage_from_openai(raw: Optional[Mapping[str, Any]]) -> Optional[TokenUsage]:
    if not raw:
        return None
    return TokenUsage.from_counts(
        raw.get("prompt_tokens"), raw.get("completion_tokens"), raw.get("total_tokens")
    )


@dataclass
class _OpenCall:
    id: str
    name: str


class OpenAIStreamTranslator:
    """Stateful chunk → stream part translator for one response."""

    def __init__(self) -> None:
        self._open: Dict[int, _OpenCall] = {}
        self._usage: Optional[TokenUsage] = None
        self._finish_reason: Optional[str] = None

    def feed(self, chunk: Mapping[str, Any]) -> List[StreamPart]:
        parts: List[StreamPart] = []
        usage = usage_from_openai(chunk.get("usage"))
        if usage is not None:
            self._usage = usage
        for choice in chunk.get("choices") or []:
            delta = choice.get("delta") or {}
            content = delta.get("content")
            if content:
                parts.append(TextDelta(content))
            for fragment in delta.get("tool_calls") or []:
                parts.extend(self._tool_fragment(fragment))
            if choice.get("finish_reason"):
                self._finish_reason = choice["finish_reason"]
                parts.extend(self._close_calls())
        return parts

    def finish(self) -> List[StreamPart]:
        """Close dangling calls and emit the terminal ``StreamFinish``."""
        parts = self._close_calls()
        parts.append(StreamFinish(usage=self._usage, finish_reason=self._finish_reason))
        return parts

    def _tool_fragment(self, fragment: Mapping[str, Any]) -> List[StreamPart]:
        parts: List[StreamPart] = []
        index = int(fragment.get("index", 0))
        function = fragment.get("function") or {}
        call = self._open.get(index)
        if call is None:
            call = _OpenCall(
                id=fragment.get("id") or f"call_{uuid.uuid4().hex}",
                name=function.get("name") or "",
            )
            self._open[index] = call
            parts.append(ToolCallStreamingStart(call.id, call.name))
        arguments = function.get("arguments")
        if arguments:
            parts.append(ToolCallDelta(call.id, arguments))
        return parts

    def _close_calls(self) -> List[StreamPart]:
        closed: List[StreamPart] = [
            ToolCallComplete(call.id, call.name) for _, call in sorted(self._open.items())
        ]
        self._open.clear()
        return closed


__all__ = ["OpenAIStreamTranslator", "usage_from_openai"]
