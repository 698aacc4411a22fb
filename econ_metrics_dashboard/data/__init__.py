"""Data fetching and caching."""

from .cache import SeriesStore
from .fred_client import FredClient
from .orchestrator import FetchOrchestrator, FetchResult, FetchStatus
from .service import EconomicDataService, MetricResult

__all__ = [
    "SeriesStore",
    "FredClient",
    "FetchOrchestrator",
    "FetchResult",
    "FetchStatus",
    "EconomicDataService",
    "MetricResult",
]
