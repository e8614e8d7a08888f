"""Per-request stream control handler.

`StreamControlHandler` sits between the completion engine and UI-facing
state. One instance serves exactly one in-flight request and owns its own
conversation snapshot, so no locking is involved.

Callback ordering for a handler:
  * ``on_chunk`` callbacks carry the cumulative assistant text and are
    suppressed once the request is finished or aborted;
  * the finish callback fires exactly once, by normal completion
    (``on_finish(usage)``) or by ``abort()`` (``on_finish(None)``);
  * tool updates go to their own callback and stop after an abort.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..cancellation import CancellationToken
from ..models import Conversation, Message, TokenUsage, ToolCall, ToolCallStatus, new_message_id

ChunkCallback = Callable[[Conversation], None]
FinishCallback = Callable[[Message], None]
ToolUpdateCallback = Callable[[ToolCall], None]


class StreamControlHandler:
    """Cancellation token, content accumulator and callback dispatcher."""

    def __init__(
        self,
        conversation: Conversation,
        *,
        on_chunk: ChunkCallback,
        on_finish: FinishCallback,
        on_tool_update: Optional[ToolUpdateCallback] = None,
        token: Optional[CancellationToken] = None,
    ) -> None:
        self._conversation = conversation
        self._chunk_callback = on_chunk
        self._finish_callback = on_finish
        self._tool_callback = on_tool_update
        self._token = token or CancellationToken()
        self._finished = False
        self._final_message: Optional[Message] = None
        self._tool_calls: Dict[str, ToolCall] = {}
        self.usage: Optional[TokenUsage] = None

    # ---- state ----------------------------------------------------------
    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def is_aborted(self) -> bool:
        return self._token.cancelled

    @property
    def final_message(self) -> Optional[Message]:
        return self._final_message

    @property
    def tool_calls(self) -> List[ToolCall]:
        return list(self._tool_calls.values())

    def get_abort_signal(self) -> CancellationToken:
        return self._token

    # ---- content --------------------------------------------------------
    def on_chunk(self, cumulative_text: str) -> None:
        """Replace the in-progress message's text and publish the new snapshot."""
        if self._finished or self._token.cancelled:
            return
        current = self._conversation.last_message()
        if current is None:
            return
        self._conversation = self._conversation.with_message(current.with_text(cumulative_text))
        self._chunk_callback(self._conversation)

    def on_finish(self, usage: Optional[TokenUsage]) -> Optional[Message]:
        """Build the final message and invoke the finish callback (once)."""
        if self._finished:
            return self._final_message
        self._finished = True
        self.usage = usage
        current = self._conversation.last_message()
        final = Message(
            id=new_message_id(),
            role="assistant",
            content=current.content if current is not None else (),
            conversation_id=self._conversation.id,
            provider=current.provider if current is not None else None,
            model=current.model if current is not None else None,
            tokens=usage.total_tokens if usage is not None else 0,
            parent_id=current.parent_id if current is not None else None,
            children_ids=current.children_ids if current is not None else (),
            prefer_index=current.prefer_index if current is not None else -1,
        )
        self._final_message = final
        self._finish_callback(final)
        return final

    def abort(self, reason: str = "aborted") -> None:
        """Cancel the request and finalize immediately with no usage."""
        self._token.cancel(reason)
        self.on_finish(None)

    # ---- tool calls -----------------------------------------------------
    def _publish(self, call: ToolCall) -> None:
        if self._tool_callback is not None:
            self._tool_callback(call)

    def _record(self, tool_call_id: str) -> ToolCall:
        call = self._tool_calls.get(tool_call_id)
        if call is None:
            call = ToolCall(id=tool_call_id, name="")
            self._tool_calls[tool_call_id] = call
        return call

    def on_tool_call(self, name: str, tool_call_id: str, arguments: Mapping[str, Any]) -> None:
        if self._token.cancelled:
            return
        call = self._record(tool_call_id)
        call.name = name
        call.arguments = dict(arguments)
        call.status = ToolCallStatus.CALLED
        self._publish(call)

    def on_tool_call_in_progress(
        self, tool_call_id: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> None:
        if self._token.cancelled:
            return
        call = self._record(tool_call_id)
        if arguments is not None:
            call.arguments = dict(arguments)
        call.status = ToolCallStatus.IN_PROGRESS
        self._publish(call)

    def on_tool_call_result(self, tool_call_id: str, result: Any) -> None:
        if self._token.cancelled:
            return
        call = self._record(tool_call_id)
        call.result = result
        call.error = None
        call.status = ToolCallStatus.COMPLETED
        self._publish(call)

    def on_tool_call_error(self, tool_call_id: str, error: Union[str, BaseException]) -> None:
        if self._token.cancelled:
            return
        call = self._record(tool_call_id)
        call.error = str(error) or type(error).__name__
        call.status = ToolCallStatus.ERROR
        self._publish(call)


__all__ = [
    "StreamControlHandler",
    "ChunkCallback",
    "FinishCallback",
    "ToolUpdateCallback",
]
