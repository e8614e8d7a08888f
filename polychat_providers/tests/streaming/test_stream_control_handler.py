from __future__ import annotations

from polychat_providers.base.models import TokenUsage


def test_chunks_replace_in_progress_text(chat_harness):
    h = chat_harness()
    h.handler.on_chunk("He")
    h.handler.on_chunk("Hello")
    assert h.chunks == ["He", "Hello"]  # nosec B101
    assert h.handler.conversation.last_message().text == "Hello"  # nosec B101
    # the placeholder keeps its id; only its content changes
    assert h.handler.conversation.last_message().id == h.placeholder.id  # nosec B101


def test_finish_fires_once_with_usage(chat_harness):
    h = chat_harness(provider="anthropic", model="claude-3-5-haiku-latest")
    h.handler.on_chunk("done")
    usage = TokenUsage.from_counts(3, 2)
    final = h.handler.on_finish(usage)
    again = h.handler.on_finish(TokenUsage.from_counts(100, 100))
    assert again is final  # nosec B101
    assert h.handler.final_message is final  # nosec B101
    assert len(h.finished) == 1  # nosec B101
    assert final.text == "done"  # nosec B101
    assert final.tokens == 5  # nosec B101
    assert final.provider == "anthropic"  # nosec B101
    assert final.id != h.placeholder.id  # nosec B101
    assert h.handler.is_finished and not h.handler.is_aborted  # nosec B101

    h.handler.on_chunk("late")
    assert h.chunks == ["done"]  # nosec B101


def test_abort_finalizes_without_usage_and_silences_callbacks(chat_harness):
    h = chat_harness()
    h.handler.on_chunk("partial")
    h.handler.abort("user")
    h.handler.abort("again")
    assert h.handler.is_aborted  # nosec B101
    assert h.handler.get_abort_signal().reason == "user"  # nosec B101
    assert len(h.finished) == 1  # nosec B101
    assert h.finished[0].tokens == 0  # nosec B101
    assert h.finished[0].text == "partial"  # nosec B101

    h.handler.on_chunk("more")
    h.handler.on_tool_call("search", "call_1", {"q": "x"})
    h.handler.on_tool_call_result("call_1", "r")
    assert h.chunks == ["partial"]  # nosec B101
    assert h.tool_updates == []  # nosec B101


def test_tool_call_lifecycle(chat_harness):
    h = chat_harness()
    h.handler.on_tool_call("search", "call_1", {})
    h.handler.on_tool_call_in_progress("call_1", {"q": "cats"})
    h.handler.on_tool_call_result("call_1", {"hits": 2})
    h.handler.on_tool_call("fetch", "call_2", {})
    h.handler.on_tool_call_error("call_2", RuntimeError("boom"))

    assert h.tool_updates == [  # nosec B101
        ("call_1", "called", None, None),
        ("call_1", "in_progress", None, None),
        ("call_1", "completed", {"hits": 2}, None),
        ("call_2", "called", None, None),
        ("call_2", "error", None, "boom"),
    ]
    calls = {c.id: c for c in h.handler.tool_calls}
    assert calls["call_1"].arguments == {"q": "cats"}  # nosec B101
    assert calls["call_1"].finished  # nosec B101


def test_tool_updates_continue_after_normal_finish(chat_harness):
    h = chat_harness()
    h.handler.on_finish(None)
    h.handler.on_tool_call("search", "call_1", {})
    assert [u[1] for u in h.tool_updates] == ["called"]  # nosec B101
