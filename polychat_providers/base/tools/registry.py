"""Typed tool registry keyed by tool name.

``invoke`` wraps execution in a :class:`ToolResultDTO`: an unknown name or an
exception raised by the tool becomes ``ok=False`` with an error code, so a
failing tool never aborts the surrounding completion.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional

from pydantic import ValidationError

from ..dto.completion_options import ToolDefinition
from ..dto.tool_result import ToolResultDTO
from ..errors import ErrorCode
from .base import FunctionTool, Tool, ToolFunction


class ToolRegistry:
    """Name → :class:`Tool` mapping used by the completion engine."""

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: Dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def register(self, tool: Tool) -> Tool:
        """Register ``tool``; a later registration with the same name replaces it."""
        self._tools[tool.name] = tool
        return tool

    def register_function(self, name: str, func: ToolFunction, **kwargs: Any) -> Tool:
        return self.register(FunctionTool(name, func, **kwargs))

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def definitions(self) -> List[ToolDefinition]:
        return [tool.definition() for tool in self._tools.values()]

    def merged(self, extra: Iterable[Tool]) -> "ToolRegistry":
        """Copy of this registry plus ``extra`` tools that are not already named."""
        merged = ToolRegistry(self._tools.values())
        for tool in extra:
            if tool.name not in merged:
                merged.register(tool)
        return merged

    async def invoke(self, name: str, args: Dict[str, Any]) -> ToolResultDTO:
        tool = self._tools.get(name)
        if tool is None:
            return ToolResultDTO(
                name=name, ok=False, code=ErrorCode.NOT_FOUND.value,
                error=f"tool '{name}' not registered",
            )
        try:
            return await tool.execute(args)
        except ValidationError as exc:
            return ToolResultDTO(
                name=name, ok=False, code=ErrorCode.VALIDATION.value, error=str(exc)
            )
        except Exception as exc:  # noqa: BLE001 - reported through the tool error path
            return ToolResultDTO(
                name=name, ok=False, code=ErrorCode.TOOL_EXECUTION.value,
                error=str(exc) or f"Error executing tool {name}",
            )


__all__ = ["ToolRegistry"]
