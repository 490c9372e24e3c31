from __future__ import annotations

import httpx
import pytest

from cgate_sdk import CGateClient, CGateConfigError, CGateError, ClientConfig
from cgate_sdk.config import DEFAULT_BASE_URL


def test_defaults() -> None:
    config = ClientConfig(api_key="key")

    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout == 60.0
    assert config.max_retries == 3
    assert config.backoff_seconds == 1.0
    assert config.user_agent.startswith("cgate-sdk-python/")


def test_trailing_slash_is_stripped() -> None:
    config = ClientConfig(api_key="key", base_url="https://x.example.com/")
    client = CGateClient(config)

    assert config.base_url == "https://x.example.com"
    assert client.base_url == "https://x.example.com"
    assert client.http.build_url("/api/client/v1/embeddings") == "https://x.example.com/api/client/v1/embeddings"


def test_missing_api_key_fails_eagerly() -> None:
    with pytest.raises(CGateConfigError):
        ClientConfig(api_key="")


@pytest.mark.parametrize("base_url", ["not a url", "ftp://files.example.com", "http://"])
def test_malformed_base_url_rejected(base_url: str) -> None:
    with pytest.raises(CGateConfigError):
        ClientConfig(api_key="key", base_url=base_url)


def test_numeric_limits_validated() -> None:
    with pytest.raises(CGateConfigError):
        ClientConfig(api_key="key", timeout=0)
    with pytest.raises(CGateConfigError):
        ClientConfig(api_key="key", max_retries=-1)


def test_config_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        ClientConfig(api_key="")


def test_config_is_frozen() -> None:
    config = ClientConfig(api_key="key")
    with pytest.raises(Exception):
        config.api_key = "other"  # type: ignore[misc]


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CGATE_API_KEY", "env-key")
    monkeypatch.setenv("CGATE_BASE_URL", "https://gateway.internal/")
    monkeypatch.setenv("CGATE_TIMEOUT", "12.5")
    monkeypatch.setenv("CGATE_MAX_RETRIES", "1")

    config = ClientConfig.from_env(backoff_seconds=0.25)

    assert config.api_key == "env-key"
    assert config.base_url == "https://gateway.internal"
    assert config.timeout == 12.5
    assert config.max_retries == 1
    assert config.backoff_seconds == 0.25


def test_from_env_without_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CGATE_API_KEY", raising=False)
    with pytest.raises(CGateConfigError):
        CGateClient.from_env()


async def test_closed_http_client_is_rejected() -> None:
    http_client = httpx.AsyncClient()
    await http_client.aclose()

    with pytest.raises(CGateError):
        CGateClient(ClientConfig(api_key="key"), http_client=http_client)


async def test_injected_http_client_is_not_closed_by_sdk() -> None:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
    async with CGateClient(ClientConfig(api_key="key"), http_client=http_client):
        pass

    assert not http_client.is_closed
    await http_client.aclose()
