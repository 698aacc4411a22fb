"""Shared fixtures for the data layer tests."""

from datetime import datetime, timezone

import httpx
import pytest

from econ_metrics_dashboard.data import FredClient, SeriesStore

from helpers import FakeClock, RecordingHandler


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
async def store(tmp_path, clock):
    series_store = SeriesStore(tmp_path / "test.db", clock=clock)
    yield series_store
    await series_store.close()


@pytest.fixture
async def make_client():
    """Build a FredClient backed by a MockTransport handler."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler: RecordingHandler, api_key: str = "test-key") -> FredClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http)
        return FredClient(api_key=api_key, client=http)

    yield _make

    for http in clients:
        await http.aclose()
