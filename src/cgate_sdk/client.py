"""Top-level async client for the CGate API."""

from __future__ import annotations

from typing import Any, Optional

import httpx
from prometheus_client import CollectorRegistry

from .config import ClientConfig
from .http import HttpClient, Sleep
from .metrics import TransportMetrics
from .resources import Chat, Embeddings, Files, Tracing, Vectors


class CGateClient:
    """Entry point for the gateway API.

    >>> async with CGateClient(ClientConfig(api_key="...")) as client:
    ...     reply = await client.chat.completions.create(
    ...         {"model": "gpt-4", "messages": [{"role": "user", "content": "Hello!"}]}
    ...     )
    ...     stream = await client.chat.completions.create({...}, stream=True)
    ...     async for chunk in stream:
    ...         print(chunk.choices[0].delta.content)
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[Sleep] = None,
        registry: Optional[CollectorRegistry] = None,
    ) -> None:
        self._config = config
        self._http = HttpClient(
            config,
            transport=transport,
            http_client=http_client,
            sleep=sleep,
            metrics=TransportMetrics(registry),
        )
        self.chat = Chat(self._http)
        self.embeddings = Embeddings(self._http)
        self.vectors = Vectors(self._http)
        self.files = Files(self._http)
        self.tracing = Tracing(self._http)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "CGateClient":
        return cls(ClientConfig.from_env(), **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def http(self) -> HttpClient:
        return self._http

    async def __aenter__(self) -> "CGateClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["CGateClient"]
