"""Streaming completion engine.

Purpose
-------
Drive one chat completion against a :class:`ChatTransport` and translate its
output into stream control handler callbacks, so every provider behaves the
same way regardless of wire format.

Modes
-----
* Blocking (``options.stream`` false): one ``complete`` call; returned tool
  calls are surfaced in backend order (started, in progress, result/error),
  then the full text is emitted once and the handler is finished with usage.
* Streaming: stream parts are processed strictly in arrival order.
  ``ToolCallStreamingStart`` opens an argument buffer and announces the call
  with empty arguments; ``ToolCallDelta`` appends silently;
  ``ToolCallComplete`` marks the call in progress and dispatches it;
  ``TextDelta`` grows the cumulative text that is re-emitted in full.

Failure modes
-------------
* Aborting the handler interrupts whatever the run is awaiting (network
  send, backoff sleep, stream read, tool call).
* Cancellation (``CancelledError``, task cancellation, or any error raised
  after the handler was aborted) propagates as cancellation and is logged at
  INFO as ``chat.cancelled``.
* Anything else is logged as ``chat.failure`` and re-raised as
  :class:`ProviderError` reading ``"<provider>/<model> chat completion
  failed: <cause>"``, chained from the cause.
* Tool failures never abort the completion; they are reported through
  ``on_tool_call_error``.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..cancellation import CancellationToken, CancelledError
from ..constants import IMAGE_GENERATION_TOOL_NAME
from ..dto.completion_options import CompletionOptions, ToolDefinition
from ..errors import RETRYABLE_CODES, ProviderError, classify_exception, is_cancellation
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import ContentPart, Message, TokenUsage, new_message_id
from ..streaming.stream_controller import StreamControlHandler
from ..streaming.stream_parts import (
    StreamFinish,
    TextDelta,
    ToolCallComplete,
    ToolCallDelta,
    ToolCallStreamingStart,
)
from ..streaming.streaming_metrics import StreamMetrics
from ..streaming.tool_call_accumulator import ToolCallAccumulator
from ..tools import ToolRegistry
from .message_format import normalize_messages
from .transport import ChatTransport, TransportRequest

_LOGGER = get_logger("polychat.completion")


def _advertised_tools(
    options: CompletionOptions, tools: Optional[ToolRegistry]
) -> List[ToolDefinition]:
    """Tool definitions sent to the backend: options first, registry after."""
    definitions: Dict[str, ToolDefinition] = {d.name: d for d in options.tools}
    if tools is not None:
        for definition in tools.definitions():
            definitions.setdefault(definition.name, definition)
    return list(definitions.values())


async def _dispatch_tool(
    handler: StreamControlHandler,
    tools: Optional[ToolRegistry],
    *,
    provider_id: str,
    tool_call_id: str,
    tool_name: str,
    arguments: Dict[str, Any],
    logger: logging.Logger,
    ctx: LogContext,
) -> None:
    handler.on_tool_call_in_progress(tool_call_id, arguments)
    if tools is None or tool_name not in tools:
        if tool_name == IMAGE_GENERATION_TOOL_NAME:
            handler.on_tool_call_error(
                tool_call_id, f"Image generation is not supported by {provider_id}"
            )
            return
        log_event(
            logger, "tool.ignored", ctx,
            level=logging.WARNING, tool=tool_name, tool_call_id=tool_call_id,
        )
        return
    result = await tools.invoke(tool_name, arguments)
    if result.ok:
        handler.on_tool_call_result(tool_call_id, result.content)
    else:
        handler.on_tool_call_error(tool_call_id, result.error or f"Error executing tool {tool_name}")


async def _run_blocking(
    transport: ChatTransport,
    request: TransportRequest,
    handler: StreamControlHandler,
    tools: Optional[ToolRegistry],
    *,
    provider_id: str,
    metrics: StreamMetrics,
    logger: logging.Logger,
    ctx: LogContext,
) -> Tuple[str, Optional[TokenUsage]]:
    token = handler.get_abort_signal()
    result = await transport.complete(request, token)
    token.raise_if_cancelled()
    for call in result.tool_calls:
        metrics.record_tool_call()
        handler.on_tool_call(call.name, call.id, call.arguments)
        if call.argument_error is not None:
            handler.on_tool_call_in_progress(call.id)
            handler.on_tool_call_error(call.id, f"Invalid tool arguments: {call.argument_error}")
            continue
        await _dispatch_tool(
            handler, tools,
            provider_id=provider_id, tool_call_id=call.id, tool_name=call.name,
            arguments=call.arguments, logger=logger, ctx=ctx,
        )
    token.raise_if_cancelled()
    metrics.record_chunk()
    handler.on_chunk(result.text)
    handler.on_finish(result.usage)
    return result.text, result.usage


async def _run_stream(
    transport: ChatTransport,
    request: TransportRequest,
    handler: StreamControlHandler,
    tools: Optional[ToolRegistry],
    *,
    provider_id: str,
    metrics: StreamMetrics,
    logger: logging.Logger,
    ctx: LogContext,
) -> Tuple[str, Optional[TokenUsage]]:
    token = handler.get_abort_signal()
    full_text = ""
    usage: Optional[TokenUsage] = None
    pending = ToolCallAccumulator()
    async with aclosing(transport.stream(request, token)) as parts:
        async for part in parts:
            token.raise_if_cancelled()
            if isinstance(part, TextDelta):
                if not part.text:
                    continue
                full_text += part.text
                metrics.record_chunk()
                handler.on_chunk(full_text)
            elif isinstance(part, ToolCallStreamingStart):
                pending.start(part.tool_call_id, part.tool_name)
                metrics.record_tool_call()
                handler.on_tool_call(part.tool_name, part.tool_call_id, {})
            elif isinstance(part, ToolCallDelta):
                pending.append(part.tool_call_id, part.args_text_delta)
            elif isinstance(part, ToolCallComplete):
                if part.tool_call_id not in pending:
                    metrics.record_tool_call()
                    handler.on_tool_call(part.tool_name, part.tool_call_id, {})
                arguments = part.args
                if arguments is None:
                    try:
                        arguments = pending.parse(part.tool_call_id)
                    except ValueError as exc:
                        pending.pop(part.tool_call_id)
                        handler.on_tool_call_in_progress(part.tool_call_id)
                        handler.on_tool_call_error(part.tool_call_id, f"Invalid tool arguments: {exc}")
                        continue
                pending.pop(part.tool_call_id)
                await _dispatch_tool(
                    handler, tools,
                    provider_id=provider_id, tool_call_id=part.tool_call_id,
                    tool_name=part.tool_name, arguments=arguments, logger=logger, ctx=ctx,
                )
            elif isinstance(part, StreamFinish):
                if part.usage is not None:
                    usage = part.usage
    token.raise_if_cancelled()
    handler.on_finish(usage)
    return full_text, usage


async def run_chat_completion(
    *,
    transport: ChatTransport,
    provider_id: str,
    model: str,
    messages: Iterable[Message],
    options: CompletionOptions,
    handler: StreamControlHandler,
    tools: Optional[ToolRegistry] = None,
    logger: Optional[logging.Logger] = None,
) -> Message:
    """Run one chat completion and return the new assistant message.

    The returned message has a fresh id, the accumulated text, the provider
    and model stamped on it, and no tree links (``prefer_index`` -1): the
    caller's conversation layer attaches it.
    """
    log = logger or _LOGGER
    ctx = LogContext(provider=provider_id, model=model)
    token: CancellationToken = handler.get_abort_signal()
    request = TransportRequest(
        model=model,
        messages=normalize_messages(messages),
        options=options,
        tools=_advertised_tools(options, tools),
    )
    metrics = StreamMetrics()
    normalized_log_event(
        log, "chat.start", ctx,
        phase="start", emitted=False, stream=options.stream, tools=len(request.tools) or None,
    )
    runner = _run_stream if options.stream else _run_blocking
    try:
        text, usage = await token.run_until_cancelled(runner(
            transport, request, handler, tools,
            provider_id=provider_id, metrics=metrics, logger=log, ctx=ctx,
        ))
    except asyncio.CancelledError:
        normalized_log_event(log, "chat.cancelled", ctx, phase="cancelled", emitted=metrics.emitted > 0)
        raise
    except Exception as exc:
        if is_cancellation(exc) or token.cancelled:
            normalized_log_event(
                log, "chat.cancelled", ctx, phase="cancelled", emitted=metrics.emitted > 0
            )
            if isinstance(exc, CancelledError):
                raise
            raise CancelledError(token.reason or "operation cancelled") from exc
        code = classify_exception(exc)
        normalized_log_event(
            log, "chat.failure", ctx,
            phase="error", error_code=code.value, emitted=metrics.emitted > 0,
            error=str(exc), level=logging.ERROR,
        )
        raise ProviderError(
            code=code,
            message=f"{provider_id}/{model} chat completion failed: {exc}",
            provider=provider_id,
            model=model,
            retryable=code in RETRYABLE_CODES,
            raw=exc,
        ) from exc

    metrics.finish()
    normalized_log_event(
        log, "chat.finish", ctx,
        phase="finalize", emitted=metrics.emitted > 0, tokens=usage, metrics=metrics.to_dict(),
    )
    return Message(
        id=new_message_id(),
        role="assistant",
        content=(ContentPart.of_text(text),),
        conversation_id=handler.conversation.id,
        provider=provider_id,
        model=model,
        tokens=usage.total_tokens if usage is not None else 0,
    )


__all__ = ["run_chat_completion"]
