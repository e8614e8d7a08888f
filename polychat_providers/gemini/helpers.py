"""Gemini REST payload helpers.

Pure translation between normalized transport shapes and the
``generateContent`` JSON format:

- system turns are folded into ``systemInstruction``; ``assistant`` maps to
  the ``model`` role,
- image and audio attachments become ``inlineData`` parts (or ``fileData``
  for URLs),
- sampling options become ``generationConfig``,
- tools become ``functionDeclarations`` with schemas reduced to the subset
  Gemini accepts.

Gemini returns function calls whole (never as argument fragments), so the
stream translator surfaces each one as start + one delta + complete with a
generated id.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Dict, List, Mapping, Optional

from ..base.completion import TransportMessage, TransportRequest, split_system
from ..base.completion.transport import CompletionResult, ToolInvocation
from ..base.dto.completion_options import ToolDefinition
from ..base.models import ContentPart, TokenUsage
from ..base.streaming.stream_parts import (
    StreamFinish,
    StreamPart,
    TextDelta,
    ToolCallComplete,
    ToolCallDelta,
    ToolCallStreamingStart,
)

# JSON Schema keywords the Gemini function-declaration schema rejects.
_UNSUPPORTED_SCHEMA_KEYS = frozenset({"$schema", "additionalProperties", "title", "$defs", "definitions"})

_TOOL_MODES = {"auto": "AUTO", "none": "NONE", "required": "ANY"}


def clean_schema(schema: Any) -> Any:
    if isinstance(schema, list):
        return [clean_schema(item) for item in schema]
    if not isinstance(schema, dict):
        return schema
    out: Dict[str, Any] = {}
    for key, value in schema.items():
        if key in _UNSUPPORTED_SCHEMA_KEYS:
            continue
        if key == "properties" and isinstance(value, dict):
            out[key] = {name: clean_schema(prop) for name, prop in value.items()}
        else:
            out[key] = clean_schema(value)
    return out


def _attachment_part(part: ContentPart) -> Optional[Dict[str, Any]]:
    data = part.data or {}
    if part.type in ("image", "audio"):
        mime = data.get("mime_type") or ("image/png" if part.type == "image" else "audio/wav")
        if data.get("base64"):
            return {"inlineData": {"mimeType": mime, "data": data["base64"]}}
        if data.get("url"):
            return {"fileData": {"mimeType": mime, "fileUri": data["url"]}}
    if part.type == "file" and data.get("content"):
        return {"text": f"[File: {data.get('name') or 'attachment'}]\n{data['content']}"}
    return None


def to_gemini_contents(messages: List[TransportMessage]) -> List[Dict[str, Any]]:
    contents: List[Dict[str, Any]] = []
    for message in messages:
        parts: List[Dict[str, Any]] = []
        if message.text:
            parts.append({"text": message.text})
        for attachment in message.attachments:
            converted = _attachment_part(attachment)
            if converted is not None:
                parts.append(converted)
        if not parts:
            continue
        contents.append({"role": "model" if message.role == "assistant" else "user", "parts": parts})
    return contents


def to_function_declarations(tools: List[ToolDefinition]) -> List[Dict[str, Any]]:
    declarations = []
    for tool in tools:
        declaration: Dict[str, Any] = {"name": tool.name, "description": tool.description}
        if tool.parameters.get("properties"):
            declaration["parameters"] = clean_schema(tool.parameters)
        declarations.append(declaration)
    return declarations


def _tool_config(choice: Optional[str]) -> Optional[Dict[str, Any]]:
    if choice is None:
        return None
    if choice in _TOOL_MODES:
        return {"functionCallingConfig": {"mode": _TOOL_MODES[choice]}}
    return {"functionCallingConfig": {"mode": "ANY", "allowedFunctionNames": [choice]}}


def build_generate_body(request: TransportRequest) -> Dict[str, Any]:
    system, rest = split_system(request.messages)
    options = request.options
    body: Dict[str, Any] = {"contents": to_gemini_contents(rest)}
    if system:
        body["systemInstruction"] = {"parts": [{"text": system}]}
    generation = {
        "maxOutputTokens": options.max_tokens,
        "temperature": options.temperature,
        "topP": options.top_p,
        "stopSequences": list(options.stop) or None,
    }
    generation = {k: v for k, v in generation.items() if v is not None}
    if generation:
        body["generationConfig"] = generation
    if request.tools:
        body["tools"] = [{"functionDeclarations": to_function_declarations(request.tools)}]
        tool_config = _tool_config(request.tool_choice)
        if tool_config is not None:
            body["toolConfig"] = tool_config
    return body


def usage_from_gemini(raw: Optional[Mapping[str, Any]]) -> Optional[TokenUsage]:
    if not raw:
        return None
    return TokenUsage.from_counts(
        raw.get("promptTokenCount"), raw.get("candidatesTokenCount"), raw.get("totalTokenCount")
    )


def _candidate(body: Mapping[str, Any]) -> Mapping[str, Any]:
    candidates = body.get("candidates") or []
    return candidates[0] if candidates else {}


def new_call_id() -> str:
    return f"call_{uuid.uuid4().hex}"


def parse_generate_response(body: Mapping[str, Any]) -> CompletionResult:
    candidate = _candidate(body)
    texts: List[str] = []
    calls: List[ToolInvocation] = []
    for part in (candidate.get("content") or {}).get("parts") or []:
        if "functionCall" in part:
            call = part["functionCall"]
            calls.append(
                ToolInvocation(id=new_call_id(), name=call.get("name") or "", arguments=dict(call.get("args") or {}))
            )
        elif part.get("text"):
            texts.append(part["text"])
    return CompletionResult(
        text="".join(texts),
        usage=usage_from_gemini(body.get("usageMetadata")),
        tool_calls=calls,
        finish_reason=candidate.get("finishReason"),
    )


class GeminiStreamTranslator:
    """``streamGenerateContent`` chunk → stream part translator."""

    def __init__(self) -> None:
        self._usage: Optional[TokenUsage] = None
        self._finish_reason: Optional[str] = None

    def feed(self, chunk: Mapping[str, Any]) -> List[StreamPart]:
        usage = usage_from_gemini(chunk.get("usageMetadata"))
        if usage is not None:
            self._usage = usage
        candidate = _candidate(chunk)
        if candidate.get("finishReason"):
            self._finish_reason = candidate["finishReason"]
        parts: List[StreamPart] = []
        for part in (candidate.get("content") or {}).get("parts") or []:
            if "functionCall" in part:
                call = part["functionCall"]
                name = call.get("name") or ""
                args = dict(call.get("args") or {})
                call_id = new_call_id()
                parts.append(ToolCallStreamingStart(call_id, name))
                parts.append(ToolCallDelta(call_id, json.dumps(args)))
                parts.append(ToolCallComplete(call_id, name, args))
            elif part.get("text"):
                parts.append(TextDelta(part["text"]))
        return parts

    def finish(self) -> List[StreamPart]:
        return [StreamFinish(usage=self._usage, finish_reason=self._finish_reason)]


__all__ = [
    "clean_schema",
    "to_gemini_contents",
    "to_function_declarations",
    "build_generate_body",
    "usage_from_gemini",
    "parse_generate_response",
    "new_call_id",
    "GeminiStreamTranslator",
]
