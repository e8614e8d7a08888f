"""Standard tool result DTO returned by ``Tool.execute``.

Provider-agnostic envelope so the completion engine can report success or
failure through the stream control handler without knowing the tool.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class ToolResultDTO(BaseModel):
    """Result envelope for a tool invocation.

    Attributes:
        name: The tool name that was invoked.
        ok: True when the tool executed successfully, False otherwise.
        content: Result payload (text, JSON-like dict or list).
        code: Error code string when ``ok`` is False.
        error: Human-readable error string when ``ok`` is False.
        metadata: Free-form metadata for tracing/auditing.
    """

    name: str
    ok: bool
    content: Optional[Union[str, Dict[str, Any], List[Any]]] = None
    code: Optional[str] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


__all__ = ["ToolResultDTO"]
