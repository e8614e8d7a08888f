"""Anthropic Messages API helpers.

Purpose:
- Build ``messages.create`` keyword arguments from a ``TransportRequest``:
  system text goes to ``system``, consecutive same-role turns are merged so
  roles alternate, images become ``image`` blocks, tools become
  ``input_schema`` definitions.
- Parse a non-streaming ``Message`` into a :class:`CompletionResult`.

This module does not import the SDK; it only reads attributes of the SDK's
response objects.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..base.completion import TransportMessage, TransportRequest, split_system
from ..base.completion.transport import CompletionResult, ToolInvocation
from ..base.models import ContentPart, TokenUsage
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS


def _image_block(part: ContentPart) -> Optional[Dict[str, Any]]:
    data = part.data or {}
    if data.get("base64"):
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": data.get("mime_type") or "image/png",
                "data": data["base64"],
            },
        }
    if data.get("url"):
        return {"type": "image", "source": {"type": "url", "url": data["url"]}}
    return None


def _blocks(message: TransportMessage) -> List[Dict[str, Any]]:
    blocks: List[Dict[str, Any]] = []
    if message.text:
        blocks.append({"type": "text", "text": message.text})
    for attachment in message.attachments:
        if attachment.type == "image" and message.role == "user":
            block = _image_block(attachment)
            if block is not None:
                blocks.append(block)
        elif attachment.type == "file" and (attachment.data or {}).get("content"):
            name = attachment.data.get("name") or "attachment"
            blocks.append({"type": "text", "text": f"[File: {name}]\n{attachment.data['content']}"})
    return blocks


def to_anthropic_messages(messages: List[TransportMessage]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for message in messages:
        role = "assistant" if message.role == "assistant" else "user"
        blocks = _blocks(message)
        if not blocks:
            continue
        if out and out[-1]["role"] == role:
            out[-1]["content"].extend(blocks)
        else:
            out.append({"role": role, "content": blocks})
    return out


def _tool_choice(choice: Optional[str]) -> Optional[Dict[str, Any]]:
    if choice is None:
        return None
    if choice == "auto":
        return {"type": "auto"}
    if choice == "required":
        return {"type": "any"}
    if choice == "none":
        return {"type": "none"}
    return {"type": "tool", "name": choice}


def build_message_params(request: TransportRequest) -> Dict[str, Any]:
    system, rest = split_system(request.messages)
    options = request.options
    params: Dict[str, Any] = {
        "model": request.model,
        "max_tokens": options.max_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS,
        "messages": to_anthropic_messages(rest),
    }
    if system:
        params["system"] = system
    if options.temperature is not None:
        params["temperature"] = options.temperature
    if options.top_p is not None:
        params["top_p"] = options.top_p
    if options.stop:
        params["stop_sequences"] = list(options.stop)
    if options.user:
        params["metadata"] = {"user_id": options.user}
    if request.tools:
        params["tools"] = [
            {"name": t.name, "description": t.description, "input_schema": t.parameters}
            for t in request.tools
        ]
        choice = _tool_choice(request.tool_choice)
        if choice is not None:
            params["tool_choice"] = choice
    return params


def usage_from_anthropic(usage: Any) -> Optional[TokenUsage]:
    if usage is None:
        return None
    return TokenUsage.from_counts(
        getattr(usage, "input_tokens", None), getattr(usage, "output_tokens", None)
    )


def parse_message(message: Any) -> CompletionResult:
    texts: List[str] = []
    calls: List[ToolInvocation] = []
    for block in message.content or []:
        if block.type == "text":
            texts.append(block.text)
        elif block.type == "tool_use":
            calls.append(ToolInvocation(id=block.id, name=block.name, arguments=dict(block.input or {})))
    return CompletionResult(
        text="".join(texts),
        usage=usage_from_anthropic(message.usage),
        tool_calls=calls,
        finish_reason=message.stop_reason,
    )


__all__ = ["to_anthropic_messages", "build_message_params", "usage_from_anthropic", "parse_message"]
