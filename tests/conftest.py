# tests/conftest.py
from __future__ import annotations

import prometheus_client
import pytest
from prometheus_client import CollectorRegistry

from tests.fixtures.feed_testkit import FakeClock, FakeFetcher, scenario_fetcher


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Force pytest-anyio to use asyncio (not trio)."""
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return scenario_fetcher()


@pytest.fixture
def metrics_registry(monkeypatch: pytest.MonkeyPatch) -> CollectorRegistry:
    """Point the metric accessors at an isolated, empty registry."""
    registry = CollectorRegistry()
    monkeypatch.setattr(prometheus_client, "REGISTRY", registry)
    return registry
