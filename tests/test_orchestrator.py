"""Tests for cache-through series loading."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from econ_metrics_dashboard.config import MetricCatalog
from econ_metrics_dashboard.data import (
    FetchOrchestrator,
    FetchStatus,
    FredClient,
    SeriesStore,
)
from econ_metrics_dashboard.errors import PersistenceError, UpstreamFetchError

from helpers import RecordingHandler, fred_payload, obs


CACHED = [obs("2024-01-01", 3.7), obs("2024-02-01", 3.9), obs("2024-03-01", 3.8)]
FETCHED = [obs("2024-04-01", 3.9), obs("2024-05-01", 4.0)]


@pytest.fixture
def mock_store():
    store = MagicMock(spec=SeriesStore)
    store.get_cached.return_value = None
    store.should_fetch.return_value = True
    return store


@pytest.fixture
def mock_client():
    client = MagicMock(spec=FredClient)
    client.fetch.return_value = FETCHED
    return client


class TestCacheHit:
    async def test_returns_cached_without_fetching(self, mock_store, mock_client):
        mock_store.get_cached.return_value = CACHED
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        result = await orchestrator.get_series("UNRATE")

        assert result == CACHED
        mock_client.fetch.assert_not_awaited()
        mock_store.should_fetch.assert_not_awaited()
        mock_store.replace.assert_not_awaited()

    async def test_load_reports_cache_hit(self, mock_store, mock_client):
        mock_store.get_cached.return_value = CACHED
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        result = await orchestrator.load("UNRATE")

        assert result.status is FetchStatus.CACHE_HIT
        assert result.ok


class TestFetchGate:
    async def test_no_fetch_needed_returns_empty(self, mock_store, mock_client):
        mock_store.should_fetch.return_value = False
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        result = await orchestrator.load("UNRATE")

        assert result.status is FetchStatus.EMPTY
        assert result.observations == []
        mock_client.fetch.assert_not_awaited()


class TestCacheMiss:
    async def test_fetches_and_writes_back(self, mock_store, mock_client):
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        result = await orchestrator.load("UNRATE")

        assert result.status is FetchStatus.FETCHED
        assert result.observations == FETCHED
        assert result.persisted is True
        mock_client.fetch.assert_awaited_once_with("UNRATE")
        series_id, observations, metadata = mock_store.replace.await_args.args
        assert series_id == "UNRATE"
        assert observations == FETCHED
        assert metadata.metric_id == "unemployment"
        assert metadata.display_name == "Unemployment Rate"

    async def test_uncatalogued_series_gets_default_metadata(self, mock_store, mock_client):
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        await orchestrator.get_series("PAYEMS")

        metadata = mock_store.replace.await_args.args[2]
        assert metadata.metric_id == "PAYEMS"
        assert metadata.display_name == "FRED Series PAYEMS"
        assert metadata.frequency == "Unknown"

    async def test_empty_upstream_is_not_persisted(self, mock_store, mock_client):
        mock_client.fetch.return_value = []
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        result = await orchestrator.load("UNRATE")

        assert result.status is FetchStatus.EMPTY
        mock_store.replace.assert_not_awaited()

    async def test_write_failure_still_returns_data(self, mock_store, mock_client):
        mock_store.replace.side_effect = PersistenceError("UNRATE", "database is locked")
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        result = await orchestrator.load("UNRATE")

        assert result.status is FetchStatus.FETCHED
        assert result.observations == FETCHED
        assert result.persisted is False
        assert await orchestrator.get_series("UNRATE") == FETCHED

    async def test_upstream_failure_propagates(self, mock_store, mock_client):
        error = UpstreamFetchError("UNRATE", "HTTP 500", status_code=500)
        mock_client.fetch.side_effect = error
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        with pytest.raises(UpstreamFetchError):
            await orchestrator.get_series("UNRATE")
        mock_store.replace.assert_not_awaited()

    async def test_load_reports_upstream_failure(self, mock_store, mock_client):
        error = UpstreamFetchError("UNRATE", "ConnectError", transport=True)
        mock_client.fetch.side_effect = error
        orchestrator = FetchOrchestrator(mock_client, mock_store)

        result = await orchestrator.load("UNRATE")

        assert result.status is FetchStatus.ERROR
        assert result.error is error
        assert not result.ok


class TestWithoutStore:
    async def test_always_fetches(self, mock_client):
        orchestrator = FetchOrchestrator(mock_client)

        result = await orchestrator.load("UNRATE")

        assert result.observations == FETCHED
        assert result.persisted is False
        mock_client.fetch.assert_awaited_once()


class TestEndToEnd:
    async def test_fresh_cache_served_without_network(self, store, clock, make_client):
        clock.advance(-1)
        await store.replace("UNRATE", CACHED, MetricCatalog().metadata_for_series("UNRATE"))
        clock.advance(1)

        handler = RecordingHandler(json_body=fred_payload(("2024-06-01", "9.9")))
        orchestrator = FetchOrchestrator(make_client(handler), store)

        assert await orchestrator.get_series("UNRATE") == CACHED
        assert handler.requests == []

    async def test_miss_fetches_and_populates_store(self, store, clock, make_client):
        handler = RecordingHandler(
            json_body=fred_payload(
                ("2024-01-01", "3.7"),
                ("2024-02-01", "3.9"),
                ("2024-03-01", "3.8"),
            )
        )
        orchestrator = FetchOrchestrator(make_client(handler), store)

        result = await orchestrator.get_series("UNRATE")

        assert result == CACHED
        assert len(handler.requests) == 1
        assert await store.get_cached("UNRATE") == CACHED
        stamp = await store.get_fetch_timestamp("UNRATE")
        assert stamp.last_fetched_at == clock.now

    async def test_stale_cache_is_refreshed(self, store, clock, make_client):
        await store.replace("UNRATE", CACHED, MetricCatalog().metadata_for_series("UNRATE"))
        clock.now += timedelta(days=8)

        handler = RecordingHandler(json_body=fred_payload(("2024-04-01", "3.9"), ("2024-05-01", "4.0")))
        orchestrator = FetchOrchestrator(make_client(handler), store)

        assert await orchestrator.get_series("UNRATE") == FETCHED
        assert await store.get_cached("UNRATE") == FETCHED

    async def test_second_call_is_served_from_cache(self, store, make_client):
        handler = RecordingHandler(json_body=fred_payload(("2024-04-01", "3.9"), ("2024-05-01", "4.0")))
        orchestrator = FetchOrchestrator(make_client(handler), store)

        await orchestrator.get_series("UNRATE")
        await orchestrator.get_series("UNRATE")

        assert len(handler.requests) == 1
