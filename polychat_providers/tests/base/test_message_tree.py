from __future__ import annotations

import pytest

from polychat_providers.base.constants import PREFER_INDEX_UNSET, STREAMING_MESSAGE_PREFIX
from polychat_providers.base.models import (
    ContentPart,
    Conversation,
    Message,
    MessageTree,
    new_streaming_placeholder,
)


def test_new_child_is_inserted_after_preferred_and_becomes_preferred():
    tree = MessageTree()
    root = Message.create("user", "q")
    tree.add(root)
    assert tree.get(root.id).prefer_index == PREFER_INDEX_UNSET  # nosec B101

    a = tree.add(Message.create("assistant", "a"), root.id)
    b = tree.add(Message.create("assistant", "b"), root.id)
    assert tree.get(root.id).children_ids == (a.id, b.id)  # nosec B101
    assert tree.get(root.id).prefer_index == 1  # nosec B101

    tree.set_prefer_index(root.id, 0)
    c = tree.add(Message.create("assistant", "c"), root.id)
    assert tree.get(root.id).children_ids == (a.id, c.id, b.id)  # nosec B101
    assert tree.get(root.id).prefer_index == 1  # nosec B101
    assert [m.text for m in tree.linear_path(root.id)] == ["q", "c"]  # nosec B101


def test_tree_rejects_unknown_parent_and_bad_prefer_index():
    tree = MessageTree()
    root = tree.add(Message.create("user", "q"))
    with pytest.raises(KeyError):
        tree.add(Message.create("assistant", "x"), "missing")
    with pytest.raises(IndexError):
        tree.set_prefer_index(root.id, 0)
    with pytest.raises(ValueError):
        tree.add(root)


def test_conversation_snapshots_are_independent():
    user = Message.create("user", "hello")
    placeholder = new_streaming_placeholder(provider="openai", model="gpt-4o")
    first = Conversation().append(user)
    second = first.append(placeholder)

    assert len(first.messages) == 1  # nosec B101
    assert [m.id for m in second.messages] == [user.id, placeholder.id]  # nosec B101
    assert second.last_message().parent_id == user.id  # nosec B101

    updated = second.with_message(placeholder.with_text("partial"))
    assert updated.last_message().text == "partial"  # nosec B101
    assert second.last_message().text == ""  # nosec B101


def test_streaming_placeholder_and_text_helpers():
    placeholder = new_streaming_placeholder()
    assert placeholder.id.startswith(STREAMING_MESSAGE_PREFIX)  # nosec B101
    assert placeholder.is_streaming_placeholder  # nosec B101

    image = ContentPart(type="image", data={"url": "https://img/x.png"})
    msg = Message.create("user", "look", parts=[image])
    assert msg.text == "look"  # nosec B101
    replaced = msg.with_text("look again")
    assert replaced.content[0].text == "look again"  # nosec B101
    assert replaced.content[1] == image  # nosec B101
    assert not msg.is_streaming_placeholder  # nosec B101
