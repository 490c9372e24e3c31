"""Server-Sent Events decoding for streaming endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Generic, List, TypeVar

logger = logging.getLogger("cgate_sdk.streaming")

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

T = TypeVar("T")


class SSEDecoder:
    """Incremental decoder for ``data: <json>`` lines.

    Text may arrive split anywhere. Only complete lines are parsed; the
    trailing fragment waits for the next chunk.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self.done = False
        self.skipped = 0

    def feed(self, text: str) -> List[Any]:
        if self.done:
            return []
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")

        events: List[Any] = []
        for line in lines:
            line = line.strip()
            if not line.startswith(DATA_PREFIX):
                continue
            data = line[len(DATA_PREFIX):]
            if data == DONE_SENTINEL:
                self.done = True
                break
            try:
                events.append(json.loads(data))
            except ValueError:
                self.skip("Failed to parse SSE data: %s", data[:200])
        return events

    def skip(self, reason: str, *args: Any) -> None:
        self.skipped += 1
        logger.warning(reason, *args)


class EventStream(Generic[T]):
    """Async iterator over decoded stream events.

    Closing the stream (``aclose`` or leaving ``async with``) releases the
    underlying HTTP response even if the body was not fully consumed.
    """

    def __init__(self, events: AsyncIterator[T]) -> None:
        self._events = events

    def __aiter__(self) -> "EventStream[T]":
        return self

    async def __anext__(self) -> T:
        return await self._events.__anext__()

    async def aclose(self) -> None:
        await self._events.aclose()  # type: ignore[attr-defined]

    async def __aenter__(self) -> "EventStream[T]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["DONE_SENTINEL", "EventStream", "SSEDecoder"]
