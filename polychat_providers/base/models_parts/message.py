"""
Chat message model.

`Message` is immutable: streaming replaces the in-progress message with a new
instance on every chunk instead of mutating it. The ``parent_id``,
``children_ids`` and ``prefer_index`` fields are read-only views of the
conversation tree; :class:`~.message_tree.MessageTree` owns the structure and
materializes them on lookup.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, Literal, Optional, Tuple

from ..constants import PREFER_INDEX_UNSET, STREAMING_MESSAGE_PREFIX
from .content_part import ContentPart


Role = Literal["system", "user", "assistant"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_message_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Message:
    """A chat message in a conversation tree.

    Attributes:
        id: Unique message id.
        role: ``"user"``, ``"assistant"`` or ``"system"``.
        content: Ordered content parts.
        conversation_id: Owning conversation, when known.
        created_at: Creation timestamp (UTC).
        provider: Provider id that produced the message (assistant only).
        model: Model id that produced the message (assistant only).
        tokens: Token count reported for the message.
        parent_id: Parent message id (``None`` for the first message).
        children_ids: Ordered child message ids (regenerations branch here).
        prefer_index: Index of the canonical child; ``-1`` means none chosen.
    """

    id: str
    role: Role
    content: Tuple[ContentPart, ...] = ()
    conversation_id: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    provider: Optional[str] = None
    model: Optional[str] = None
    tokens: int = 0
    parent_id: Optional[str] = None
    children_ids: Tuple[str, ...] = ()
    prefer_index: int = PREFER_INDEX_UNSET

    @classmethod
    def create(
        cls,
        role: Role,
        text: str = "",
        *,
        parts: Iterable[ContentPart] = (),
        **kwargs,
    ) -> "Message":
        """Build a message with a fresh id from text and/or extra parts."""
        content = ((ContentPart.of_text(text),) if text else ()) + tuple(parts)
        return cls(id=kwargs.pop("id", None) or new_message_id(), role=role, content=content, **kwargs)

    @property
    def text(self) -> str:
        """Text parts joined with newlines; non-text parts are skipped."""
        return "\n".join(p.text for p in self.content if p.type == "text" and p.text is not None)

    @property
    def is_streaming_placeholder(self) -> bool:
        return self.id.startswith(STREAMING_MESSAGE_PREFIX)

    def with_text(self, text: str) -> "Message":
        """Return a copy whose text content is replaced by ``text``.

        Non-text parts are kept after the text part.
        """
        others = tuple(p for p in self.content if p.type != "text")
        return replace(self, content=(ContentPart.of_text(text),) + others)


def new_streaming_placeholder(
    *,
    conversation_id: Optional[str] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> Message:
    """Create the empty assistant message that receives streamed chunks."""
    return Message(
        id=f"{STREAMING_MESSAGE_PREFIX}{uuid.uuid4()}",
        role="assistant",
        content=(ContentPart.of_text(""),),
        conversation_id=conversation_id,
        provider=provider,
        model=model,
    )


__all__ = [
    "Message",
    "Role",
    "new_message_id",
    "new_streaming_placeholder",
]
