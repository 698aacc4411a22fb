"""Settings and metric catalog."""

from .settings import Settings, DEFAULT_FRESHNESS_DAYS, DEFAULT_REQUEST_TIMEOUT
from .catalog import CATEGORIES, METRICS, MetricCatalog, MetricInfo

__all__ = [
    "Settings",
    "DEFAULT_FRESHNESS_DAYS",
    "DEFAULT_REQUEST_TIMEOUT",
    "CATEGORIES",
    "METRICS",
    "MetricCatalog",
    "MetricInfo",
]
