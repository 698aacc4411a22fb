"""Derived series calculations."""

from econ_metrics_dashboard.indicators.transforms import (
    TIMEFRAMES,
    filter_timeframe,
    normalize_timeframe,
    percentage_change,
    process_for_metric,
    to_frame,
)

__all__ = [
    "TIMEFRAMES",
    "filter_timeframe",
    "normalize_timeframe",
    "percentage_change",
    "process_for_metric",
    "to_frame",
]
