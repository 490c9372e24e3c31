"""Vector provider, index and vector API."""

from __future__ import annotations

import asyncio
from typing import List, Mapping, Optional

from ..http import HttpClient
from ..types import (
    QueryVectorsResponse,
    SuccessResponse,
    VectorIndexEnvelope,
    VectorIndexList,
    VectorProviderEnvelope,
    VectorProviderList,
)
from ._base import Params, Resource, api_path


def _index_path(provider_key: str, index_id: str, *rest: str) -> str:
    return api_path("vector", "providers", provider_key, "indexes", index_id, *rest)


class VectorProviders(Resource):
    async def list(
        self,
        *,
        status: Optional[str] = None,
        driver: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> VectorProviderList:
        return await self._request(
            "GET",
            api_path("vector", "providers"),
            VectorProviderList,
            query={"status": status, "driver": driver},
            headers=headers,
            cancel=cancel,
        )

    async def create(
        self,
        params: Params,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> VectorProviderEnvelope:
        return await self._request(
            "POST",
            api_path("vector", "providers"),
            VectorProviderEnvelope,
            body=params,
            headers=headers,
            cancel=cancel,
        )


class VectorIndexes(Resource):
    async def list(
        self,
        provider_key: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> VectorIndexList:
        return await self._request(
            "GET",
            api_path("vector", "providers", provider_key, "indexes"),
            VectorIndexList,
            headers=headers,
            cancel=cancel,
        )

    async def create(
        self,
        provider_key: str,
        params: Params,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> VectorIndexEnvelope:
        """Create an index. The gateway may hand back an existing one with ``reused=True``."""
        return await self._request(
            "POST",
            api_path("vector", "providers", provider_key, "indexes"),
            VectorIndexEnvelope,
            body=params,
            headers=headers,
            cancel=cancel,
        )

    async def get(
        self,
        provider_key: str,
        index_id: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> VectorIndexEnvelope:
        return await self._request(
            "GET", _index_path(provider_key, index_id), VectorIndexEnvelope, headers=headers, cancel=cancel
        )

    async def update(
        self,
        provider_key: str,
        index_id: str,
        params: Params,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> VectorIndexEnvelope:
        return await self._request(
            "PATCH",
            _index_path(provider_key, index_id),
            VectorIndexEnvelope,
            body=params,
            headers=headers,
            cancel=cancel,
        )

    async def delete(
        self,
        provider_key: str,
        index_id: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SuccessResponse:
        return await self._request(
            "DELETE", _index_path(provider_key, index_id), SuccessResponse, headers=headers, cancel=cancel
        )

    async def upsert(
        self,
        provider_key: str,
        index_id: str,
        params: Params,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SuccessResponse:
        return await self._request(
            "POST",
            _index_path(provider_key, index_id, "upsert"),
            SuccessResponse,
            body=params,
            headers=headers,
            cancel=cancel,
        )

    async def query(
        self,
        provider_key: str,
        index_id: str,
        params: Params,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> QueryVectorsResponse:
        return await self._request(
            "POST",
            _index_path(provider_key, index_id, "query"),
            QueryVectorsResponse,
            body=params,
            headers=headers,
            cancel=cancel,
        )

    async def delete_vectors(
        self,
        provider_key: str,
        index_id: str,
        ids: List[str],
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SuccessResponse:
        return await self._request(
            "DELETE",
            _index_path(provider_key, index_id, "vectors"),
            SuccessResponse,
            body={"ids": list(ids)},
            headers=headers,
            cancel=cancel,
        )


class Vectors:
    """Vector API root; ``upsert``/``query``/``delete`` are shortcuts to ``indexes``."""

    def __init__(self, http: HttpClient) -> None:
        self.providers = VectorProviders(http)
        self.indexes = VectorIndexes(http)

    async def upsert(self, provider_key: str, index_id: str, params: Params, **kwargs) -> SuccessResponse:
        return await self.indexes.upsert(provider_key, index_id, params, **kwargs)

    async def query(self, provider_key: str, index_id: str, params: Params, **kwargs) -> QueryVectorsResponse:
        return await self.indexes.query(provider_key, index_id, params, **kwargs)

    async def delete(self, provider_key: str, index_id: str, ids: List[str], **kwargs) -> SuccessResponse:
        return await self.indexes.delete_vectors(provider_key, index_id, ids, **kwargs)


__all__ = ["VectorIndexes", "VectorProviders", "Vectors"]
