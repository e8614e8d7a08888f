"""Helpers for non-streaming OpenAI-style responses.

``parse_completion`` turns a decoded ``/chat/completions`` body into a
:class:`CompletionResult`. Tool calls keep backend order; arguments that are
not a JSON object leave ``arguments`` empty and set ``argument_error``, so the
engine reports that call as failed instead of failing the whole completion.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..completion.transport import CompletionResult, ToolInvocation
from ..streaming.tool_call_accumulator import parse_arguments
from .stream_translator import usage_from_openai


def _invocation(raw: Mapping[str, Any]) -> ToolInvocation:
    function = raw.get("function") or {}
    text = function.get("arguments") or ""
    call_id, name = str(raw.get("id") or ""), function.get("name") or ""
    try:
        arguments: Dict[str, Any] = parse_arguments(text)
    except ValueError as exc:
        return ToolInvocation(id=call_id, name=name, argument_error=str(exc))
    return ToolInvocation(id=call_id, name=name, arguments=arguments)


def parse_completion(body: Mapping[str, Any]) -> CompletionResult:
    choices = body.get("choices") or []
    if not choices:
        raise ValueError("No chat completion choices returned")
    choice = choices[0]
    message = choice.get("message") or {}
    tool_calls: List[ToolInvocation] = [_invocation(tc) for tc in message.get("tool_calls") or []]
    return CompletionResult(
        text=message.get("content") or "",
        usage=usage_from_openai(body.get("usage")),
        tool_calls=tool_calls,
        finish_reason=choice.get("finish_reason"),
    )


__all__ = ["parse_completion"]
