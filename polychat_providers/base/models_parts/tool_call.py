"""
Tool call record tracked by the stream control handler.

Lifecycle: ``called`` when the backend announces the call, ``in_progress``
once its arguments are complete and execution starts, then ``completed``
with a result or ``error`` with a message.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ToolCallStatus(str, Enum):
    CALLED = "called"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    status: ToolCallStatus = ToolCallStatus.CALLED
    result: Any = None
    error: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.status in (ToolCallStatus.COMPLETED, ToolCallStatus.ERROR)


__all__ = ["ToolCall", "ToolCallStatus"]
