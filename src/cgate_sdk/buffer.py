"""File-backed offline buffer for tracing sessions that failed to upload."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterator, Optional


class OfflineBuffer:
    """Stores failed payloads as NDJSON so they can be replayed later."""

    def __init__(self, path: Optional[str] = None) -> None:
        self._enabled = bool(path)
        self._path = Path(path) if path else None
        if self._enabled:
            self._path.parent.mkdir(parents=True, exist_ok=True)  # type: ignore[union-attr]
            self._path.touch(exist_ok=True)  # type: ignore[union-attr]

    def append(self, payload: Dict[str, Any]) -> None:
        if not self._enabled:
            return
        line = json.dumps(payload, separators=(",", ":"))
        with self._path.open("a", encoding="utf-8") as fh:  # type: ignore[union-attr]
            fh.write(line + "\n")

    def drain(self) -> Iterator[Dict[str, Any]]:
        if not self._enabled or not self._path.exists():  # type: ignore[union-attr]
            return iter(())
        with self._path.open("r", encoding="utf-8") as fh:  # type: ignore[union-attr]
            lines = fh.readlines()
        self._path.unlink(missing_ok=True)  # type: ignore[union-attr]
        return (json.loads(line) for line in lines if line.strip())

    async def replay(self, sender: Callable[[Dict[str, Any]], Awaitable[Any]]) -> int:
        """Send buffered payloads with ``sender``.

        Payloads that fail to send, and every payload after them, are written
        back so nothing is lost; the sender's error propagates.
        """
        pending = list(self.drain())
        count = 0
        try:
            for payload in pending:
                await sender(payload)
                count += 1
        finally:
            for payload in pending[count:]:
                self.append(payload)
        return count

    def enabled(self) -> bool:
        return self._enabled

    def __len__(self) -> int:
        if not self._enabled or not self._path.exists():  # type: ignore[union-attr]
            return 0
        with self._path.open("r", encoding="utf-8") as fh:  # type: ignore[union-attr]
            return sum(1 for line in fh if line.strip())


__all__ = ["OfflineBuffer"]
