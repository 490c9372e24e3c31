"""Error types raised by the CGate SDK."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

import httpx


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    API = "api"


class CGateError(Exception):
    """Base error for transport-level failures.

    ``retryable`` tells the request executor whether another attempt may be
    made; subclasses flip it for failures that must surface immediately.
    """

    kind = ErrorKind.TRANSPORT
    retryable = True

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response


class CGateConnectionError(CGateError):
    """The request never produced an HTTP response (DNS, connect, reset)."""


class CGateTimeoutError(CGateError):
    """The request did not finish within the configured timeout."""


class CGateCancelledError(CGateError):
    """The caller set the cancellation event for the request."""

    retryable = False


class CGateResponseError(CGateError):
    """A 2xx body did not match the expected response model; ``response`` holds the raw body."""

    retryable = False


class CGateConfigError(CGateError, ValueError):
    """Invalid client configuration, raised at construction time."""

    retryable = False


class CGateAPIError(CGateError):
    """The gateway answered with a non-2xx status."""

    kind = ErrorKind.API
    retryable = False

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: Optional[str] = None,
        response: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code, response=response)
        self.error_type = error_type

    def __repr__(self) -> str:
        return f"CGateAPIError(status_code={self.status_code!r}, error_type={self.error_type!r}, message={self.message!r})"


def api_error_from_response(response: httpx.Response) -> CGateAPIError:
    """Build a CGateAPIError from an already-read error response."""
    message = f"HTTP {response.status_code}: {response.reason_phrase}"
    error_type: Optional[str] = None
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, str):
            message = error
        elif isinstance(error, dict):
            message = error.get("message") or message
            error_type = error.get("type")

    return CGateAPIError(message, response.status_code, error_type=error_type, response=data)


__all__ = [
    "CGateAPIError",
    "CGateCancelledError",
    "CGateConfigError",
    "CGateConnectionError",
    "CGateError",
    "CGateResponseError",
    "CGateTimeoutError",
    "ErrorKind",
    "api_error_from_response",
]
