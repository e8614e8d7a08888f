"""Streaming metrics collected per completion and logged on finish."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Chunk count and latency for a single completion call."""

    emitted: int = 0
    tool_calls: int = 0
    started_at: float = field(default_factory=time.monotonic)
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def record_chunk(self) -> None:
        if self.emitted == 0:
            self.time_to_first_token_ms = (time.monotonic() - self.started_at) * 1000.0
        self.emitted += 1

    def record_tool_call(self) -> None:
        self.tool_calls += 1

    def finish(self) -> "StreamMetrics":
        self.total_duration_ms = (time.monotonic() - self.started_at) * 1000.0
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emitted": self.emitted,
            "tool_calls": self.tool_calls,
            "time_to_first_token_ms": self.time_to_first_token_ms,
            "total_duration_ms": self.total_duration_ms,
        }


__all__ = ["StreamMetrics"]
