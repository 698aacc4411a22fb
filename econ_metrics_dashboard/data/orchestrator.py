"""Cache-through coordination between the local store and FRED."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from econ_metrics_dashboard.config import MetricCatalog
from econ_metrics_dashboard.data.cache import SeriesStore
from econ_metrics_dashboard.data.fred_client import FredClient
from econ_metrics_dashboard.errors import PersistenceError, UpstreamFetchError
from econ_metrics_dashboard.models import Observation


logger = logging.getLogger(__name__)


class FetchStatus(Enum):
    """How a series request was resolved."""

    CACHE_HIT = "cache_hit"
    FETCHED = "fetched"
    EMPTY = "empty"
    ERROR = "error"
    NOT_FOUND = "not_found"  # no series is known for the requested metric


@dataclass
class FetchResult:
    """Outcome of a series request."""

    series_id: str
    status: FetchStatus
    observations: list[Observation] = field(default_factory=list)
    error: UpstreamFetchError | None = None
    persisted: bool = False  # True when a fetched series was written back

    @property
    def ok(self) -> bool:
        return self.status not in (FetchStatus.ERROR, FetchStatus.NOT_FOUND)


class FetchOrchestrator:
    """
    Serves series from the local cache, falling back to FRED on a miss.

    The store is optional. Without one every lookup behaves like an empty,
    stale cache and fetched data is never persisted.
    """

    def __init__(
        self,
        client: FredClient,
        store: SeriesStore | None = None,
        catalog: MetricCatalog | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.catalog = catalog or MetricCatalog()

    async def _get_cached(self, series_id: str) -> list[Observation] | None:
        if self.store is None:
            return None
        return await self.store.get_cached(series_id)

    async def _should_fetch(self, series_id: str) -> bool:
        if self.store is None:
            return True
        return await self.store.should_fetch(series_id)

    async def _write_back(self, series_id: str, observations: list[Observation]) -> bool:
        if self.store is None:
            return False
        try:
            await self.store.replace(
                series_id, observations, self.catalog.metadata_for_series(series_id)
            )
        except PersistenceError as e:
            logger.error(f"Serving {series_id} without caching it: {e}")
            return False
        return True

    async def load(self, series_id: str) -> FetchResult:
        """
        Resolve a series request without raising.

        Order of precedence:
        1. Fresh cached data is returned as-is, FRED is not called.
        2. If the store reports the series needs no fetch (another process
           refreshed it but nothing was readable), an empty result is returned.
        3. Otherwise FRED is queried and non-empty results are written back
           best-effort.
        """
        cached = await self._get_cached(series_id)
        if cached is not None:
            logger.debug(f"Cache hit for {series_id} ({len(cached)} observations)")
            return FetchResult(series_id, FetchStatus.CACHE_HIT, cached)

        if not await self._should_fetch(series_id):
            logger.info(f"{series_id} is fresh but has no readable data, skipping fetch")
            return FetchResult(series_id, FetchStatus.EMPTY)

        try:
            observations = await self.client.fetch(series_id)
        except UpstreamFetchError as e:
            logger.error(str(e))
            return FetchResult(series_id, FetchStatus.ERROR, error=e)

        if not observations:
            logger.info(f"No data returned for {series_id}")
            return FetchResult(series_id, FetchStatus.EMPTY)

        persisted = await self._write_back(series_id, observations)
        return FetchResult(series_id, FetchStatus.FETCHED, observations, persisted=persisted)

    async def get_series(self, series_id: str) -> list[Observation]:
        """
        Get observations for a series from cache or FRED.

        Raises:
            UpstreamFetchError: Only when nothing was cached and FRED failed
        """
        result = await self.load(series_id)
        if result.error is not None:
            raise result.error
        return result.observations
