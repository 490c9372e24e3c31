"""Shared plumbing for resource facades."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import quote

from pydantic import BaseModel, ValidationError
from pydantic_core import to_jsonable_python

from ..errors import CGateResponseError
from ..http import HttpClient

API_PREFIX = "/api/client/v1"

M = TypeVar("M", bound=BaseModel)

Params = Union[BaseModel, Mapping[str, Any]]


def api_path(*segments: str) -> str:
    """Join path segments under the client API prefix, escaping identifiers."""
    return "/".join([API_PREFIX, *(quote(str(segment), safe="") for segment in segments)])


def to_payload(params: Optional[Params]) -> Optional[Dict[str, Any]]:
    """Convert request params to JSON-ready data; mappings may hold nested models."""
    if params is None:
        return None
    if isinstance(params, BaseModel):
        return params.model_dump(mode="json", by_alias=True, exclude_none=True)
    return to_jsonable_python(dict(params), by_alias=True)


def parse_response(model: Type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise CGateResponseError(
            f"Unexpected {model.__name__} response: {exc.error_count()} validation error(s)",
            response=data,
        ) from exc


class Resource:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def _request(
        self,
        method: str,
        path: str,
        model: Type[M],
        *,
        body: Optional[Params] = None,
        query: Optional[Params] = None,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> M:
        data = await self._http.request(
            method,
            path,
            body=to_payload(body),
            query=to_payload(query),
            headers=headers,
            cancel=cancel,
        )
        return parse_response(model, data)


__all__ = ["API_PREFIX", "Params", "Resource", "api_path", "parse_response", "to_payload"]
