"""Embeddings API."""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

from ..types import EmbeddingResponse
from ._base import Params, Resource, api_path


class Embeddings(Resource):
    async def create(
        self,
        params: Params,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> EmbeddingResponse:
        return await self._request(
            "POST",
            api_path("embeddings"),
            EmbeddingResponse,
            body=params,
            headers=headers,
            cancel=cancel,
        )


__all__ = ["Embeddings"]
