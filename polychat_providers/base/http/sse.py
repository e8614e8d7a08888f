"""Server-sent events reader for streaming HTTP responses.

Yields the ``data`` payload of each event. Multi-line data fields are joined
with newlines; comment lines (``:``) and other fields are skipped. A
``[DONE]`` payload ends the stream. The cancellation token is polled at every
line so an abort stops iteration at the next event boundary.
"""
from __future__ import annotations

from typing import AsyncIterator, List, Optional

import httpx

from ..cancellation import CancellationToken

DONE_SENTINEL = "[DONE]"


async def iter_sse_data(
    response: httpx.Response,
    cancellation_token: Optional[CancellationToken] = None,
) -> AsyncIterator[str]:
    buffer: List[str] = []
    async for line in response.aiter_lines():
        if cancellation_token is not None:
            cancellation_token.raise_if_cancelled()
        if not line:
            if buffer:
                data = "\n".join(buffer)
                buffer = []
                if data == DONE_SENTINEL:
                    return
                yield data
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if field != "data":
            continue
        buffer.append(value[1:] if value.startswith(" ") else value)
    if buffer:
        data = "\n".join(buffer)
        if data != DONE_SENTINEL:
            yield data


__all__ = ["iter_sse_data", "DONE_SENTINEL"]
