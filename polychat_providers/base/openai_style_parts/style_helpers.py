"""
Helper utilities for OpenAI-compatible Chat Completions transports.

Purpose:
- Translate normalized history (``TransportMessage``) into the OpenAI
  ``messages`` array, including image attachments on user turns.
- Assemble request bodies from ``TransportRequest`` (sampling parameters,
  stop sequences, tools and tool choice, streaming flags).

External dependencies:
- None beyond package DTOs; no network I/O happens here.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from ..completion.transport import TransportMessage, TransportRequest
from ..dto.completion_options import ToolDefinition
from ..models import ContentPart

_TOOL_CHOICE_KEYWORDS = {"auto", "none", "required"}


def _image_url(part: ContentPart) -> Optional[str]:
    data = part.data or {}
    if data.get("url"):
        return str(data["url"])
    if data.get("base64"):
        mime = data.get("mime_type") or "image/png"
        return f"data:{mime};base64,{data['base64']}"
    return None


def _file_text(part: ContentPart) -> Optional[str]:
    data = part.data or {}
    content = data.get("content")
    if not content:
        return None
    name = data.get("name") or "attachment"
    return f"[File: {name}]\n{content}"


def to_openai_content(message: TransportMessage) -> Union[str, List[Dict[str, Any]]]:
    """Content for one message.

    User turns become a content-part list (text first, then images and inlined
    text files). Assistant and system turns are plain joined text.
    """
    if message.role != "user":
        return message.text
    parts: List[Dict[str, Any]] = []
    if message.text:
        parts.append({"type": "text", "text": message.text})
    for attachment in message.attachments:
        if attachment.type == "image":
            url = _image_url(attachment)
            if url:
                parts.append({"type": "image_url", "image_url": {"url": url}})
        elif attachment.type == "file":
            text = _file_text(attachment)
            if text:
                parts.append({"type": "text", "text": text})
    return parts


def to_openai_messages(messages: List[TransportMessage]) -> List[Dict[str, Any]]:
    return [{"role": m.role, "content": to_openai_content(m)} for m in messages]


def to_openai_tools(tools: List[ToolDefinition]) -> List[Dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": t.name,
                "description": t.description,
                "parameters": t.parameters,
            },
        }
        for t in tools
    ]


def tool_choice_param(choice: Optional[str]) -> Any:
    """Map ``tool_choice``: keywords pass through, anything else names a function."""
    if choice is None:
        return None
    if choice in _TOOL_CHOICE_KEYWORDS:
        return choice
    return {"type": "function", "function": {"name": choice}}


def build_chat_params(
    request: TransportRequest,
    *,
    stream: bool,
    include_usage: bool = True,
) -> Dict[str, Any]:
    """Assemble the body for ``POST /chat/completions``.

    Unset sampling options are omitted so the backend applies its own
    defaults.
    """
    options = request.options
    params: Dict[str, Any] = {
        "model": request.model,
        "messages": to_openai_messages(request.messages),
    }
    optional = {
        "temperature": options.temperature,
        "top_p": options.top_p,
        "frequency_penalty": options.frequency_penalty,
        "presence_penalty": options.presence_penalty,
        "max_tokens": options.max_tokens,
        "user": options.user,
    }
    params.update({k: v for k, v in optional.items() if v is not None})
    if options.stop:
        params["stop"] = list(options.stop)
    if request.tools:
        params["tools"] = to_openai_tools(request.tools)
        choice = tool_choice_param(request.tool_choice)
        if choice is not None:
            params["tool_choice"] = choice
    if stream:
        params["stream"] = True
        if include_usage:
            params["stream_options"] = {"include_usage": True}
    return params


__all__ = [
    "to_openai_content",
    "to_openai_messages",
    "to_openai_tools",
    "tool_choice_param",
    "build_chat_params",
]
