"""Chat completions API."""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional, Union

from ..http import HttpClient
from ..streaming import EventStream
from ..types import ChatCompletionChunk, ChatCompletionResponse
from ._base import Params, Resource, api_path, to_payload


class ChatCompletions(Resource):
    async def create(
        self,
        params: Params,
        *,
        stream: Optional[bool] = None,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> Union[ChatCompletionResponse, EventStream[ChatCompletionChunk]]:
        """Create a chat completion.

        Streaming is chosen by ``stream`` when given, otherwise by the
        ``stream`` field of ``params``. A streaming call returns an
        :class:`EventStream` of :class:`ChatCompletionChunk`; nothing is sent
        until it is iterated.
        """
        body = to_payload(params) or {}
        if stream is not None:
            body["stream"] = stream
        path = api_path("chat", "completions")

        if body.get("stream"):
            return self._http.stream(
                "POST",
                path,
                body=body,
                headers=headers,
                cancel=cancel,
                cast=ChatCompletionChunk.model_validate,
            )
        return await self._request("POST", path, ChatCompletionResponse, body=body, headers=headers, cancel=cancel)


class Chat:
    def __init__(self, http: HttpClient) -> None:
        self.completions = ChatCompletions(http)


__all__ = ["Chat", "ChatCompletions"]
