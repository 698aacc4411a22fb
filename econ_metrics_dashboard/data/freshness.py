"""Freshness rule for cached series."""

from datetime import datetime, timezone

from econ_metrics_dashboard.config.settings import DEFAULT_FRESHNESS_DAYS


FRESHNESS_THRESHOLD_DAYS = DEFAULT_FRESHNESS_DAYS

SECONDS_PER_DAY = 24 * 60 * 60


def _as_utc(moment: datetime) -> datetime:
    # naive timestamps are stored and compared as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def elapsed_days(last_fetched_at: datetime, now: datetime) -> float:
    """Fractional days between two timestamps."""
    delta = _as_utc(now) - _as_utc(last_fetched_at)
    return delta.total_seconds() / SECONDS_PER_DAY


def is_stale(
    last_fetched_at: datetime | None,
    now: datetime,
    threshold_days: float = FRESHNESS_THRESHOLD_DAYS,
) -> bool:
    """
    Decide whether a cached series must be refetched.

    Args:
        last_fetched_at: When the series was last fetched and stored, or None
            if it never was
        now: Current time
        threshold_days: Maximum age in days still considered fresh

    Returns:
        True when never fetched or older than ``threshold_days``
    """
    if last_fetched_at is None:
        return True
    return elapsed_days(last_fetched_at, now) > threshold_days
