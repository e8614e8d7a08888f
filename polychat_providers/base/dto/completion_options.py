"""Per-request completion options.

Purpose
-------
Carry everything a caller decides about one chat completion: target provider
and model, sampling parameters, streaming mode, the tool definitions
advertised to the backend and the user identifier.

External dependencies
---------------------
- Pydantic v2 ``BaseModel``. Instances are frozen so a request's options
  cannot change while it is in flight.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ToolDefinition(BaseModel):
    """Function-style tool definition advertised to the backend.

    ``parameters`` is a JSON Schema object describing the arguments.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )


class CompletionOptions(BaseModel):
    """Immutable options for one chat-completion request."""

    model_config = ConfigDict(frozen=True)

    provider: str
    model: str
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    max_tokens: Optional[int] = None
    stop: Tuple[str, ...] = ()
    stream: bool = True
    tools: Tuple[ToolDefinition, ...] = ()
    tool_choice: Optional[str] = None
    user: Optional[str] = None


__all__ = ["ToolDefinition", "CompletionOptions"]
