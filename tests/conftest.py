from __future__ import annotations

from typing import Callable, List

import httpx
import pytest
from prometheus_client import CollectorRegistry

from cgate_sdk import CGateClient, ClientConfig


@pytest.fixture()
def sleeps() -> List[float]:
    return []


@pytest.fixture()
def make_client(sleeps: List[float]) -> Callable[..., CGateClient]:
    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    def factory(handler, **overrides) -> CGateClient:
        settings = dict(api_key="test-key", base_url="https://api.example.com")
        settings.update(overrides)
        return CGateClient(
            ClientConfig(**settings),
            transport=httpx.MockTransport(handler),
            sleep=fake_sleep,
            registry=CollectorRegistry(),
        )

    return factory
