"""
Arena of conversation messages with explicit tree indexes.

Messages are stored by id; the parent, children and preferred-branch
relations live in separate index maps rather than inside the messages, so
replacing a message (as streaming does on every chunk) never leaves stale
references behind.

Branch insertion: a new child is inserted right after the parent's currently
preferred child and becomes the preferred one. With no preference yet
(``-1``) it lands at index 0.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from ..constants import PREFER_INDEX_UNSET
from .message import Message


class MessageTree:
    """Id-indexed message arena with parent/children/prefer maps."""

    def __init__(self) -> None:
        self._messages: Dict[str, Message] = {}
        self._parent: Dict[str, Optional[str]] = {}
        self._children: Dict[str, List[str]] = {}
        self._prefer: Dict[str, int] = {}

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def add(self, message: Message, parent_id: Optional[str] = None) -> Message:
        """Insert ``message`` under ``parent_id`` and return its materialized view."""
        if message.id in self._messages:
            raise ValueError(f"message {message.id!r} already present")
        if parent_id is not None and parent_id not in self._messages:
            raise KeyError(parent_id)
        self._messages[message.id] = message
        self._parent[message.id] = parent_id
        self._children[message.id] = []
        self._prefer[message.id] = PREFER_INDEX_UNSET
        if parent_id is not None:
            siblings = self._children[parent_id]
            position = min(self._prefer[parent_id] + 1, len(siblings))
            siblings.insert(position, message.id)
            self._prefer[parent_id] = position
        return self.get(message.id)

    def get(self, message_id: str) -> Message:
        """Return the stored message with tree fields filled from the indexes."""
        message = self._messages[message_id]
        return replace(
            message,
            parent_id=self._parent[message_id],
            children_ids=tuple(self._children[message_id]),
            prefer_index=self._prefer[message_id],
        )

    def replace(self, message: Message) -> None:
        """Swap the stored message for ``message.id``; structure is unchanged."""
        if message.id not in self._messages:
            raise KeyError(message.id)
        self._messages[message.id] = message

    def set_prefer_index(self, message_id: str, index: int) -> None:
        children = self._children[message_id]
        if not -1 <= index < len(children):
            raise IndexError(index)
        self._prefer[message_id] = index

    def linear_path(self, first_id: Optional[str]) -> List[Message]:
        """Follow preferred branches from ``first_id`` and return the visible list."""
        path: List[Message] = []
        current = first_id
        while current is not None and current in self._messages:
            path.append(self.get(current))
            children = self._children[current]
            prefer = self._prefer[current]
            current = children[prefer] if 0 <= prefer < len(children) else None
        return path

    def last_message(self, first_id: Optional[str]) -> Optional[Message]:
        path = self.linear_path(first_id)
        return path[-1] if path else None

    def copy(self) -> "MessageTree":
        clone = MessageTree()
        clone._messages = dict(self._messages)
        clone._parent = dict(self._parent)
        clone._children = {k: list(v) for k, v in self._children.items()}
        clone._prefer = dict(self._prefer)
        return clone


__all__ = ["MessageTree"]
