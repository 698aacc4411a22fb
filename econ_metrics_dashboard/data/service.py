"""Entry points used by the dashboard UI."""

import logging
from dataclasses import dataclass, field

from econ_metrics_dashboard.config import MetricCatalog, Settings
from econ_metrics_dashboard.data.cache import SeriesStore
from econ_metrics_dashboard.data.fred_client import FredClient
from econ_metrics_dashboard.data.orchestrator import (
    FetchOrchestrator,
    FetchResult,
    FetchStatus,
)
from econ_metrics_dashboard.errors import PersistenceError, UpstreamFetchError
from econ_metrics_dashboard.indicators import (
    filter_timeframe,
    normalize_timeframe,
    percentage_change,
    process_for_metric,
)
from econ_metrics_dashboard.models import Observation


logger = logging.getLogger(__name__)


FALLBACK_MESSAGE = "Live data is unavailable. Showing static/simulated data instead."


@dataclass
class MetricResult:
    """Data for one dashboard metric, ready for display."""

    metric_id: str
    series_id: str | None
    status: FetchStatus
    observations: list[Observation] = field(default_factory=list)
    error: str | None = None

    @property
    def source(self) -> str:
        if self.series_id is None:
            return "Federal Reserve Economic Data (FRED)"
        return f"Federal Reserve Economic Data (FRED) - {self.series_id}"

    @property
    def fallback_message(self) -> str | None:
        """Message for the UI when live data failed and it falls back to static data."""
        return FALLBACK_MESSAGE if self.status is FetchStatus.ERROR else None


class EconomicDataService:
    """
    Facade over the catalog, cache and FRED client.

    Components are passed in explicitly; ``from_settings`` wires the default
    SQLite store and FRED client.
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
        self.orchestrator = FetchOrchestrator(client, store, self.catalog)

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, persist: bool = True
    ) -> "EconomicDataService":
        settings = settings or Settings()
        store = None
        if persist:
            store = SeriesStore(settings.db_path, freshness_days=settings.freshness_days)
        return cls(FredClient.from_settings(settings), store)

    async def close(self) -> None:
        await self.client.aclose()
        if self.store is not None:
            await self.store.close()

    async def __aenter__(self) -> "EconomicDataService":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def resolve_series_id(self, metric_id: str) -> str | None:
        """Map a metric id to its FRED series, checking the catalog then the cache."""
        series_id = self.catalog.resolve_series_id(metric_id)
        if series_id is not None:
            return series_id
        if self.store is None:
            return None
        return await self.store.find_series_for_metric(metric_id)

    async def get_series(
        self, metric_or_series_id: str, timeframe: str | None = None
    ) -> list[Observation]:
        """
        Get a series by metric id or FRED series id.

        Args:
            metric_or_series_id: Dashboard metric id, or a FRED series id
            timeframe: Optional trailing window ("1Y", "5Y", "10Y", "MAX")

        Raises:
            ValueError: If the timeframe is not recognized
            UpstreamFetchError: If nothing is cached and FRED failed
        """
        normalize_timeframe(timeframe)
        series_id = await self.resolve_series_id(metric_or_series_id) or metric_or_series_id
        observations = await self.orchestrator.get_series(series_id)
        return filter_timeframe(observations, timeframe)

    async def get_percentage_change(self, series_id: str) -> list[Observation]:
        """Year-over-year percent change of a series."""
        return percentage_change(await self.get_series(series_id))

    async def load_metric(self, metric_id: str) -> MetricResult:
        """
        Load a metric for display without raising.

        Rate-style metrics are converted to year-over-year change. Failures
        are reported on the result so the UI can decide what to show. An
        unknown metric gets NOT_FOUND and no fallback message.
        """
        series_id = await self.resolve_series_id(metric_id)
        if series_id is None:
            return MetricResult(
                metric_id,
                None,
                FetchStatus.NOT_FOUND,
                error=f"Metric with ID '{metric_id}' not found",
            )

        result: FetchResult = await self.orchestrator.load(series_id)
        if result.error is not None:
            return MetricResult(metric_id, series_id, result.status, error=str(result.error))

        processed = process_for_metric(result.observations, metric_id, self.catalog)
        status = result.status if processed else FetchStatus.EMPTY
        return MetricResult(metric_id, series_id, status, processed)

    async def refresh_all(self) -> dict[str, int]:
        """
        Fetch every catalog series from FRED and rewrite the cache.

        Freshness is ignored. Series that fail or come back empty are logged
        and skipped.

        Returns:
            Dict mapping series_id to the number of observations stored
        """
        stored = {}
        errors = {}

        for series_id in self.catalog.series_ids():
            try:
                observations = await self.client.fetch(series_id)
                if not observations:
                    logger.warning(f"No data found for series {series_id}, skipping")
                    continue
                if self.store is not None:
                    await self.store.replace(
                        series_id, observations, self.catalog.metadata_for_series(series_id)
                    )
                stored[series_id] = len(observations)
            except (UpstreamFetchError, PersistenceError) as e:
                logger.error(f"Error refreshing {series_id}: {e}")
                errors[series_id] = str(e)

        if errors:
            logger.warning(f"Failed to refresh {len(errors)} series: {list(errors.keys())}")

        return stored

    async def cache_status(self) -> dict[str, dict]:
        """Cache status for cached series plus any catalog series not yet cached."""
        status = await self.store.get_cache_status() if self.store is not None else {}

        for metric in self.catalog:
            if metric.series_id not in status:
                status[metric.series_id] = {
                    "metric_id": metric.metric_id,
                    "title": metric.display_name,
                    "observation_count": 0,
                    "first_date": None,
                    "last_date": None,
                    "last_fetched": None,
                }

        return status
