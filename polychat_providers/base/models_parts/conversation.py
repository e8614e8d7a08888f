"""
Conversation snapshot model.

A `Conversation` is an immutable snapshot: ``with_message`` returns a new
conversation over a copied tree, which is what the stream control handler
hands to its chunk callback.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional

from .message import Message
from .message_tree import MessageTree


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Conversation:
    """Conversation snapshot: metadata plus the message arena."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    title: str = ""
    first_message_id: Optional[str] = None
    tree: MessageTree = field(default_factory=MessageTree)
    folder_id: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    draft: str = ""

    @property
    def messages(self) -> List[Message]:
        """Messages along the preferred branch, first to last."""
        return self.tree.linear_path(self.first_message_id)

    def last_message(self) -> Optional[Message]:
        return self.tree.last_message(self.first_message_id)

    def with_message(self, message: Message) -> "Conversation":
        """Return a new snapshot where ``message`` replaces the stored one."""
        tree = self.tree.copy()
        tree.replace(message)
        return replace(self, tree=tree, updated_at=_now())

    def append(self, message: Message, parent_id: Optional[str] = None) -> "Conversation":
        """Return a new snapshot with ``message`` attached.

        ``parent_id`` defaults to the current last message; the first message
        of an empty conversation becomes ``first_message_id``.
        """
        tree = self.tree.copy()
        if self.first_message_id is None:
            tree.add(message)
            return replace(self, tree=tree, first_message_id=message.id, updated_at=_now())
        if parent_id is None:
            last = self.last_message()
            parent_id = last.id if last is not None else self.first_message_id
        tree.add(message, parent_id)
        return replace(self, tree=tree, updated_at=_now())


__all__ = ["Conversation"]
