"""Message history normalization shared by all transports.

Helpers here are pure. ``normalize_messages`` reduces domain messages to
``TransportMessage`` (role + text + attachments); ``split_system`` separates
system text for backends that take it out of band (Anthropic, Gemini).
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..models import Message
from .transport import TransportMessage


def normalize_messages(messages: Iterable[Message]) -> List[TransportMessage]:
    """Convert history to transport shape.

    Empty assistant messages (such as the streaming placeholder) are dropped;
    every other message keeps its role, joined text and non-text parts.
    """
    out: List[TransportMessage] = []
    for message in messages:
        attachments = tuple(p for p in message.content if p.type != "text")
        text = message.text
        if message.role == "assistant" and not text.strip() and not attachments:
            continue
        out.append(TransportMessage(role=message.role, text=text, attachments=attachments))
    return out


def split_system(messages: Iterable[TransportMessage]) -> Tuple[Optional[str], List[TransportMessage]]:
    """Return ``(joined system text or None, non-system messages)``."""
    system_parts: List[str] = []
    rest: List[TransportMessage] = []
    for message in messages:
        if message.role == "system":
            if message.text:
                system_parts.append(message.text)
        else:
            rest.append(message)
    return ("\n\n".join(system_parts) if system_parts else None), rest


__all__ = ["normalize_messages", "split_system"]
