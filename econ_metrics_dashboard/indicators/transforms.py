"""Derived series calculations."""

import numpy as np
import pandas as pd

from econ_metrics_dashboard.config import MetricCatalog
from econ_metrics_dashboard.models import Observation


# Lookback windows offered by the dashboard, in years (None = full history)
TIMEFRAMES: dict[str, int | None] = {
    "1Y": 1,
    "5Y": 5,
    "10Y": 10,
    "MAX": None,
}


def to_frame(series: list[Observation]) -> pd.DataFrame:
    """
    Convert observations to a DataFrame.

    Returns:
        DataFrame with sorted DatetimeIndex and 'value' column. When a date
        appears more than once the last value wins.
    """
    if not series:
        return pd.DataFrame(columns=["value"])

    df = pd.DataFrame([{"date": obs.date, "value": obs.value} for obs in series])
    df["date"] = pd.to_datetime(df["date"])
    df = df.drop_duplicates(subset="date", keep="last").sort_values("date")
    df.set_index("date", inplace=True)
    return df


def from_frame(df: pd.DataFrame, column: str = "value") -> list[Observation]:
    """Convert a date-indexed DataFrame column back to observations."""
    return [
        Observation(date=ts.date(), value=float(val))
        for ts, val in df[column].items()
        if pd.notna(val)
    ]


def round_half_away(values: pd.Series, decimals: int = 2) -> pd.Series:
    """Round to `decimals` places with ties going away from zero."""
    scale = 10**decimals
    return np.sign(values) * np.floor(np.abs(values) * scale + 0.5) / scale


def percentage_change(series: list[Observation]) -> list[Observation]:
    """
    Year-over-year percent change.

    Each point is compared with the point on the same month and day of the
    previous calendar year. Points without a prior-year counterpart, or whose
    prior-year value is zero, are skipped.

    Args:
        series: Observations in any order

    Returns:
        Percent changes rounded to 2 decimals, sorted by date
    """
    if len(series) < 2:
        return []

    df = to_frame(series).reset_index()
    df["year"] = df["date"].dt.year
    df["month"] = df["date"].dt.month
    df["day"] = df["date"].dt.day

    # shift each point forward a year so it lines up with the point it precedes
    prior = df[["year", "month", "day", "value"]].rename(columns={"value": "previous"})
    prior["year"] = prior["year"] + 1

    aligned = df.merge(prior, on=["year", "month", "day"], how="inner")
    aligned = aligned[aligned["previous"] != 0]
    if aligned.empty:
        return []

    change = (
        (aligned["value"] - aligned["previous"]) / aligned["previous"].abs() * 100
    )
    aligned["change"] = round_half_away(change)
    aligned = aligned.sort_values("date").set_index("date")
    return from_frame(aligned, column="change")


def normalize_timeframe(timeframe: str | None) -> str | None:
    """Canonical TIMEFRAMES key, raising ValueError if unknown."""
    if timeframe is None:
        return None
    key = timeframe.strip().upper()
    if key not in TIMEFRAMES:
        raise ValueError(
            f"Unknown timeframe {timeframe!r}. Available: {', '.join(TIMEFRAMES)}"
        )
    return key


def filter_timeframe(
    series: list[Observation], timeframe: str | None
) -> list[Observation]:
    """
    Restrict a series to a trailing window.

    The window ends at the latest observation, not today, so infrequent
    series (quarterly, annual) still show a full window.

    Args:
        series: Observations in any order
        timeframe: One of TIMEFRAMES (case-insensitive), or None for all data

    Returns:
        Observations inside the window, sorted by date

    Raises:
        ValueError: If the timeframe is not recognized
    """
    key = normalize_timeframe(timeframe)
    if key is None:
        return series

    ordered = sorted(series, key=lambda obs: obs.date)
    years = TIMEFRAMES[key]
    if years is None or not ordered:
        return ordered

    cutoff = (pd.Timestamp(ordered[-1].date) - pd.DateOffset(years=years)).date()
    return [obs for obs in ordered if obs.date >= cutoff]


def process_for_metric(
    series: list[Observation],
    metric_id: str,
    catalog: MetricCatalog | None = None,
) -> list[Observation]:
    """Convert level series to growth rates for rate-style metrics."""
    catalog = catalog or MetricCatalog()
    if catalog.is_rate_style(metric_id):
        return percentage_change(series)
    return series
