"""Request transport for the CGate API.

Single-shot calls go through :meth:`HttpClient.request`, which races every
attempt against the configured timeout and the caller's cancel event and
retries transport failures with exponential backoff. Streaming calls go
through :meth:`HttpClient.stream`, which issues one request and decodes the
SSE body lazily.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from contextlib import contextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Iterator, Mapping, Optional, TypeVar

import httpx
from pydantic import BaseModel

from .config import ClientConfig
from .errors import (
    CGateAPIError,
    CGateCancelledError,
    CGateConnectionError,
    CGateError,
    CGateTimeoutError,
    api_error_from_response,
)
from .metrics import TransportMetrics
from .streaming import EventStream, SSEDecoder

logger = logging.getLogger("cgate_sdk.http")

T = TypeVar("T")

Query = Mapping[str, Any]
Sleep = Callable[[float], Awaitable[None]]


@contextmanager
def _translate_transport_errors() -> Iterator[None]:
    try:
        yield
    except httpx.TimeoutException as exc:
        raise CGateTimeoutError(str(exc) or "Request timed out") from exc
    except httpx.HTTPError as exc:
        raise CGateConnectionError(str(exc) or type(exc).__name__) from exc


async def _race(
    factory: Callable[[], Awaitable[T]],
    cancel: Optional[asyncio.Event],
    timeout: Optional[float],
) -> T:
    """Await ``factory()`` unless the cancel event fires or the timeout elapses first.

    The losing side is cancelled before returning. A set cancel event takes
    precedence over a timeout that expires at the same moment.
    """
    if cancel is not None and cancel.is_set():
        raise CGateCancelledError("Request was cancelled")

    task = asyncio.ensure_future(factory())
    waiters = {task}
    cancel_waiter: Optional[asyncio.Future] = None
    if cancel is not None:
        cancel_waiter = asyncio.ensure_future(cancel.wait())
        waiters.add(cancel_waiter)

    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if cancel_waiter is not None:
            cancel_waiter.cancel()
        if not task.done():
            task.cancel()
            await asyncio.wait({task})

    if task in done:
        return task.result()
    if cancel is not None and cancel.is_set():
        raise CGateCancelledError("Request was cancelled")
    raise CGateTimeoutError(f"Request timed out after {timeout}s")


async def _read_next(chunks: AsyncIterator[str]) -> Optional[str]:
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None


def _outcome(error: CGateError) -> str:
    if isinstance(error, CGateAPIError):
        return "api_error"
    if isinstance(error, CGateCancelledError):
        return "cancelled"
    if isinstance(error, CGateTimeoutError):
        return "timeout"
    return "transport_error"


def encode_body(body: Any) -> Optional[str]:
    if body is None:
        return None
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(body, separators=(",", ":"))


class HttpClient:
    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[Sleep] = None,
        metrics: Optional[TransportMetrics] = None,
    ) -> None:
        if http_client is not None:
            if http_client.is_closed:
                raise CGateError("HTTP client is closed; pass an open httpx.AsyncClient or a transport")
            self._client = http_client
            self._owns_client = False
        else:
            self._client = httpx.AsyncClient(timeout=config.timeout, transport=transport)
            self._owns_client = True
        self._config = config
        self._sleep: Sleep = sleep or asyncio.sleep
        self.metrics = metrics or TransportMetrics()

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def build_url(self, path: str, query: Optional[Query] = None) -> str:
        if path.startswith("/"):
            path = path[1:]
        url = httpx.URL(f"{self._config.base_url}/{path}")
        params = {key: value for key, value in (query or {}).items() if value is not None}
        if params:
            url = url.copy_merge_params(params)
        return str(url)

    def build_headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
            "User-Agent": self._config.user_agent,
        }
        headers.update(self._config.headers)
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        query: Optional[Query] = None,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> Any:
        url = self.build_url(path, query)
        request_headers = self.build_headers(headers)
        content = encode_body(body)
        max_retries = self._config.max_retries

        for attempt in range(max_retries + 1):
            try:
                return await self._attempt(method, url, request_headers, content, cancel)
            except CGateError as exc:
                if not exc.retryable or attempt >= max_retries:
                    raise
                delay = self._config.backoff_seconds * (2**attempt)
                logger.warning(
                    "Request %s %s failed with %s, retrying in %.1fs (attempt %d/%d)",
                    method,
                    url,
                    type(exc).__name__,
                    delay,
                    attempt + 1,
                    max_retries,
                )
                self.metrics.retries.labels(method=method).inc()
                await self._sleep(delay)

        raise CGateError("Request failed after retries")  # pragma: no cover - loop always returns or raises

    async def _attempt(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[str],
        cancel: Optional[asyncio.Event],
    ) -> Any:
        start = time.perf_counter()
        try:
            with _translate_transport_errors():
                response = await _race(
                    lambda: self._client.request(method, url, headers=headers, content=content),
                    cancel,
                    self._config.timeout,
                )
            if not response.is_success:
                raise api_error_from_response(response)
            result = self._decode(response)
        except CGateError as exc:
            self.metrics.record_outcome(method, _outcome(exc))
            raise
        finally:
            self.metrics.latency.labels(method=method).observe(time.perf_counter() - start)

        self.metrics.record_outcome(method, "success")
        logger.debug("Request %s %s -> %d", method, url, response.status_code)
        return result

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise CGateError(
                "Response body is not valid JSON",
                status_code=response.status_code,
                response=response.text,
            ) from exc

    def stream(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        query: Optional[Query] = None,
        headers: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
        cast: Optional[Callable[[Any], T]] = None,
    ) -> EventStream[T]:
        """Open a streaming call. The request is sent on first iteration and never retried."""
        events = self._iter_events(
            method,
            self.build_url(path, query),
            self.build_headers(headers),
            encode_body(body),
            cancel,
            cast,
        )
        return EventStream(events)

    async def _iter_events(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[str],
        cancel: Optional[asyncio.Event],
        cast: Optional[Callable[[Any], Any]],
    ) -> AsyncIterator[Any]:
        request = self._client.build_request(method, url, headers=headers, content=content)
        try:
            with _translate_transport_errors():
                response = await _race(lambda: self._client.send(request, stream=True), cancel, None)
        except CGateError as exc:
            self.metrics.record_outcome(method, _outcome(exc))
            raise

        decoder = SSEDecoder()
        try:
            with _translate_transport_errors():
                if not response.is_success:
                    await response.aread()
                    raise api_error_from_response(response)

                chunks = response.aiter_text()
                while not decoder.done:
                    if cancel is None:
                        chunk = await _read_next(chunks)
                    else:
                        chunk = await _race(lambda: _read_next(chunks), cancel, None)
                    if chunk is None:
                        break
                    for event in decoder.feed(chunk):
                        if cast is not None:
                            try:
                                event = cast(event)
                            except ValueError:
                                decoder.skip("Skipping SSE event with unexpected shape: %s", str(event)[:200])
                                continue
                        yield event
        except CGateError as exc:
            self.metrics.record_outcome(method, _outcome(exc))
            raise
        else:
            self.metrics.record_outcome(method, "success")
            logger.debug("Stream %s %s finished (done=%s)", method, url, decoder.done)
        finally:
            if decoder.skipped:
                self.metrics.skipped_frames.inc(decoder.skipped)
            await response.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["HttpClient", "encode_body"]
