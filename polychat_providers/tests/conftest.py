"""Pytest configuration for the providers test suite.

Shared fixtures:
- ``clean_env``: isolates configuration (env vars, config/dotenv caches).
- ``recording_sleep``: async sleep stand-in that records requested delays.
- ``sse_body`` / ``sse_events``: build ``text/event-stream`` payloads.
- ``chat_harness``: conversation + stream control handler with recorded
  callbacks, the way a UI layer would wire them.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Tuple

import pytest

from polychat_providers.base.models import Conversation, Message, new_streaming_placeholder
from polychat_providers.base.streaming import StreamControlHandler
from polychat_providers.config import reset_config_cache
from polychat_providers.config.env import ENV_ALIASES, ENV_MAP

_ENV_SUFFIXES = ("BASE_URL", "API_VERSION", "ORGANIZATION", "NAME", "MODELS")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Strip provider env vars and point config/dotenv at nothing."""
    for provider, var in ENV_MAP.items():
        monkeypatch.delenv(var, raising=False)
        for alias in ENV_ALIASES.get(provider, ()):
            monkeypatch.delenv(alias, raising=False)
        for suffix in _ENV_SUFFIXES:
            monkeypatch.delenv(f"{provider.upper()}_{suffix}", raising=False)
    monkeypatch.delenv("POLYCHAT_CONFIG_FILE", raising=False)
    monkeypatch.setenv("POLYCHAT_DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class RecordingSleep:
    def __init__(self, hook: Optional[Callable[[float], None]] = None) -> None:
        self.calls: List[float] = []
        self._hook = hook

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._hook is not None:
            self._hook(seconds)


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def sse_body() -> Callable[[Iterable[Any]], bytes]:
    """``data:`` lines for each payload (dicts are JSON-encoded), then ``[DONE]``."""

    def _build(payloads: Iterable[Any], done: bool = True) -> bytes:
        lines = []
        for payload in payloads:
            data = payload if isinstance(payload, str) else json.dumps(payload)
            lines.append(f"data: {data}\n\n")
        if done:
            lines.append("data: [DONE]\n\n")
        return "".join(lines).encode()

    return _build


@pytest.fixture()
def sse_events() -> Callable[[Iterable[Tuple[str, Mapping[str, Any]]]], bytes]:
    """Named events (``event:`` + ``data:``), as the Anthropic API sends them."""

    def _build(events: Iterable[Tuple[str, Mapping[str, Any]]]) -> bytes:
        return "".join(
            f"event: {name}\ndata: {json.dumps(dict(data, type=name))}\n\n" for name, data in events
        ).encode()

    return _build


class ChatHarness:
    """Conversation with one user turn and a streaming placeholder, plus recorders."""

    def __init__(self, prompt: str = "Hi", provider: str = "openai", model: str = "gpt-4o") -> None:
        self.user = Message.create("user", prompt)
        self.placeholder = new_streaming_placeholder(provider=provider, model=model)
        conversation = Conversation().append(self.user).append(self.placeholder)
        self.chunks: List[str] = []
        self.finished: List[Message] = []
        self.tool_updates: List[Tuple[str, str, Any, Any]] = []
        self.events: List[str] = []
        self.handler = StreamControlHandler(
            conversation,
            on_chunk=self._chunk,
            on_finish=self._finish,
            on_tool_update=self._tool_update,
        )

    def _chunk(self, conversation: Conversation) -> None:
        self.events.append("chunk")
        self.chunks.append(conversation.last_message().text)

    def _finish(self, message: Message) -> None:
        self.events.append("finish")
        self.finished.append(message)

    def _tool_update(self, call: Any) -> None:
        self.events.append(f"tool:{call.status.value}")
        self.tool_updates.append((call.id, call.status.value, call.result, call.error))

    @property
    def history(self) -> List[Message]:
        return [self.user]


@pytest.fixture()
def chat_harness() -> Callable[..., ChatHarness]:
    return ChatHarness
