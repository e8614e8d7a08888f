"""Cancellation token implementation.

Exposes the ``CancellationToken`` class handed from a stream control handler
to the transports and the HTTP client. Cheap checks poll ``cancelled`` (or
call ``raise_if_cancelled``) at each suspension point; long awaits such as a
network send or a backoff sleep go through ``run_until_cancelled`` so that
``cancel`` interrupts them mid-flight.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from .cancelled_error import CancelledError
from .state import State

T = TypeVar("T")


class CancellationToken:
    """A cancellation token usable from synchronous and asynchronous code.

    All access happens on the event loop thread, so no locking is needed.
    """

    def __init__(self) -> None:
        self._state = State()
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Repeated calls keep the first reason."""
        if self._state.cancelled:
            return
        self._state.cancelled = True
        self._state.reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    async def wait(self) -> None:
        """Block until ``cancel`` is called."""
        await self._event.wait()

    async def run_until_cancelled(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        When the token fires, the pending work is cancelled and awaited, and
        ``CancelledError`` is raised. A result that raced the cancellation and
        exposes ``aclose`` (an open streaming response) is closed first.
        Cancelling the calling task cancels the work as well.
        """
        if self._state.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()
        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not work.done():
                work.cancel()
                await asyncio.wait({work})
        if not self._state.cancelled:
            return work.result()
        if not work.cancelled() and work.exception() is None:
            closer = getattr(work.result(), "aclose", None)
            if closer is not None:
                await closer()
        raise CancelledError(self._state.reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._state.cancelled}, reason={self._state.reason!r})"


__all__ = ["CancellationToken"]
