"""Tool interface.

Every tool exposes a name, a description, a JSON Schema for its arguments and
an async ``execute(args) -> ToolResultDTO``. Two implementations cover the
cases the completion engine meets:

* :class:`TypedTool` validates arguments against a pydantic model whose
  schema is also what gets advertised to the backend (built-in tools).
* :class:`FunctionTool` wraps a caller-supplied sync or async callable taking
  the raw argument dict (generic path).
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ClassVar, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from ..dto.completion_options import ToolDefinition
from ..dto.tool_result import ToolResultDTO

ArgsT = TypeVar("ArgsT", bound=BaseModel)
ToolFunction = Callable[[Dict[str, Any]], Union[Any, Awaitable[Any]]]


def _as_content(value: Any) -> Any:
    if value is None or isinstance(value, (str, dict, list)):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump()
    return str(value)


class Tool(ABC):
    """Explicit tool contract resolved by name through a ``ToolRegistry``."""

    name: str
    description: str = ""

    @property
    @abstractmethod
    def parameters(self) -> Dict[str, Any]:
        """JSON Schema of the accepted arguments."""

    @abstractmethod
    async def execute(self, args: Dict[str, Any]) -> ToolResultDTO:
        """Run the tool; may raise, the caller reports failures."""

    def definition(self) -> ToolDefinition:
        return ToolDefinition(name=self.name, description=self.description, parameters=self.parameters)


class TypedTool(Tool, Generic[ArgsT]):
    """Tool whose arguments are validated by ``args_model``."""

    args_model: ClassVar[Type[BaseModel]]

    @property
    def parameters(self) -> Dict[str, Any]:
        return self.args_model.model_json_schema()

    async def execute(self, args: Dict[str, Any]) -> ToolResultDTO:
        parsed = self.args_model.model_validate(args)
        content = await self.run(parsed)  # type: ignore[arg-type]
        return ToolResultDTO(name=self.name, ok=True, content=_as_content(content))

    @abstractmethod
    async def run(self, args: ArgsT) -> Any:
        """Execute with validated arguments."""


class FunctionTool(Tool):
    """Caller-supplied tool backed by a plain (sync or async) function."""

    def __init__(
        self,
        name: str,
        func: ToolFunction,
        *,
        description: str = "",
        parameters: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.name = name
        self.description = description
        self._func = func
        self._parameters = parameters or {"type": "object", "properties": {}}

    @property
    def parameters(self) -> Dict[str, Any]:
        return self._parameters

    async def execute(self, args: Dict[str, Any]) -> ToolResultDTO:
        result = self._func(args)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, ToolResultDTO):
            return result
        return ToolResultDTO(name=self.name, ok=True, content=_as_content(result))


__all__ = ["Tool", "TypedTool", "FunctionTool", "ToolFunction"]
