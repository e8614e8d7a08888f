"""Incremental tool-call argument assembly.

Argument text arrives as concatenation-only fragments keyed by tool-call id.
Fragments for one id are appended in arrival order; parsing happens once, when
the call completes.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List


def parse_arguments(text: str) -> Dict[str, Any]:
    """Parse assembled argument text into a dict.

    Empty text means no arguments. Raises ``ValueError`` for malformed JSON or
    a non-object payload.
    """
    if not text.strip():
        return {}
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError(f"tool arguments must be a JSON object, got {type(parsed).__name__}")
    return parsed


@dataclass
class _PendingCall:
    name: str
    fragments: List[str] = field(default_factory=list)


class ToolCallAccumulator:
    """Per-id argument buffers for tool calls still being streamed."""

    def __init__(self) -> None:
        self._calls: Dict[str, _PendingCall] = {}

    def __contains__(self, tool_call_id: object) -> bool:
        return tool_call_id in self._calls

    def start(self, tool_call_id: str, tool_name: str) -> None:
        self._calls[tool_call_id] = _PendingCall(name=tool_name)

    def append(self, tool_call_id: str, fragment: str) -> None:
        call = self._calls.setdefault(tool_call_id, _PendingCall(name=""))
        call.fragments.append(fragment)

    def arguments_text(self, tool_call_id: str) -> str:
        call = self._calls.get(tool_call_id)
        return "".join(call.fragments) if call else ""

    def parse(self, tool_call_id: str) -> Dict[str, Any]:
        return parse_arguments(self.arguments_text(tool_call_id))

    def pop(self, tool_call_id: str) -> None:
        self._calls.pop(tool_call_id, None)


__all__ = ["ToolCallAccumulator", "parse_arguments"]
