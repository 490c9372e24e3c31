"""File bucket and object API."""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

from ..http import HttpClient
from ..types import FileBucketEnvelope, FileBucketList, FileList, UploadFileResponse
from ._base import Params, Resource, api_path


class FileBuckets(Resource):
    async def list(
        self,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> FileBucketList:
        return await self._request("GET", api_path("files", "buckets"), FileBucketList, headers=headers, cancel=cancel)

    async def get(
        self,
        bucket_key: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> FileBucketEnvelope:
        return await self._request(
            "GET",
            api_path("files", "buckets", bucket_key),
            FileBucketEnvelope,
            headers=headers,
            cancel=cancel,
        )


class Files(Resource):
    def __init__(self, http: HttpClient) -> None:
        super().__init__(http)
        self.buckets = FileBuckets(http)

    async def list(
        self,
        bucket_key: str,
        query: Optional[Params] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> FileList:
        """List objects in a bucket; ``query`` takes ``search``, ``limit`` and ``cursor``."""
        return await self._request(
            "GET",
            api_path("files", "buckets", bucket_key, "objects"),
            FileList,
            query=query,
            headers=headers,
            cancel=cancel,
        )

    async def upload(
        self,
        bucket_key: str,
        params: Params,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> UploadFileResponse:
        return await self._request(
            "POST",
            api_path("files", "buckets", bucket_key, "objects"),
            UploadFileResponse,
            body=params,
            headers=headers,
            cancel=cancel,
        )


__all__ = ["FileBuckets", "Files"]
