"""Agent tracing API."""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

from ..types import IngestResponse
from ._base import Params, Resource, api_path


class Tracing(Resource):
    async def ingest(
        self,
        session: Params,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> IngestResponse:
        """Send one tracing session with its buffered events."""
        return await self._request(
            "POST",
            api_path("tracing", "sessions"),
            IngestResponse,
            body=session,
            headers=headers,
            cancel=cancel,
        )


__all__ = ["Tracing"]
