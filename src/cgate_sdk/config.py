"""Configuration objects for the CGate Python SDK."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict

import httpx

from ._version import __version__
from .errors import CGateConfigError

DEFAULT_BASE_URL = "https://api.cognipeer.com"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_SECONDS = 1.0


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS
    user_agent: str = f"cgate-sdk-python/{__version__}"
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.api_key:
            raise CGateConfigError("API key is required")
        base_url = (self.base_url or DEFAULT_BASE_URL).rstrip("/")
        try:
            url = httpx.URL(base_url)
        except httpx.InvalidURL as exc:
            raise CGateConfigError(f"Invalid base URL: {self.base_url!r}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise CGateConfigError(f"Base URL must be an absolute http(s) URL, got {self.base_url!r}")
        if self.timeout <= 0:
            raise CGateConfigError("timeout must be positive")
        if self.max_retries < 0:
            raise CGateConfigError("max_retries must be >= 0")
        object.__setattr__(self, "base_url", base_url)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        values: Dict[str, Any] = {
            "api_key": os.environ.get("CGATE_API_KEY", ""),
            "base_url": os.environ.get("CGATE_BASE_URL", DEFAULT_BASE_URL),
            "timeout": float(os.environ.get("CGATE_TIMEOUT", DEFAULT_TIMEOUT)),
            "max_retries": int(os.environ.get("CGATE_MAX_RETRIES", DEFAULT_MAX_RETRIES)),
            "backoff_seconds": float(os.environ.get("CGATE_BACKOFF_SECONDS", DEFAULT_BACKOFF_SECONDS)),
        }
        values.update(overrides)
        return cls(**values)


__all__ = ["ClientConfig", "DEFAULT_BASE_URL", "DEFAULT_MAX_RETRIES", "DEFAULT_TIMEOUT"]
