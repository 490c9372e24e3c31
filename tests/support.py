from __future__ import annotations

import asyncio
import json
from typing import Any, List

import httpx


class RecordingStream(httpx.AsyncByteStream):
    """Response body that yields fixed chunks and remembers whether it was closed."""

    def __init__(self, chunks: List[bytes], hang: bool = False) -> None:
        self.chunks = chunks
        self.hang = hang
        self.closed = False
        self.reads = 0

    async def __aiter__(self):
        for chunk in self.chunks:
            self.reads += 1
            yield chunk
        if self.hang:
            await asyncio.sleep(30)

    async def aclose(self) -> None:
        self.closed = True


def sse_line(payload: Any) -> bytes:
    return f"data: {json.dumps(payload)}\n".encode("utf-8")
