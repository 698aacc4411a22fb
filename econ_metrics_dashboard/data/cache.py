"""SQLite cache for economic series."""

import asyncio
import functools
import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable

from econ_metrics_dashboard.config.settings import DEFAULT_FRESHNESS_DAYS
from econ_metrics_dashboard.data.freshness import is_stale
from econ_metrics_dashboard.errors import PersistenceError
from econ_metrics_dashboard.models import (
    FetchTimestamp,
    Observation,
    SeriesMetadata,
    SeriesRecord,
)


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SeriesStore:
    """
    SQLite-backed store for cached FRED series.

    One connection is opened for the life of the store. Every query runs on a
    single worker thread, so the async methods never block the event loop and
    the connection is never shared between threads.

    Reads never raise: a storage error is logged and reported as "nothing
    cached". Writes raise PersistenceError.
    """

    def __init__(
        self,
        db_path: Path | str,
        freshness_days: float = DEFAULT_FRESHNESS_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db_path = db_path
        self.freshness_days = freshness_days
        self._clock = clock
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="series-store"
        )
        # autocommit mode; replace() manages its own transaction
        self._conn = sqlite3.connect(
            str(db_path), check_same_thread=False, isolation_level=None
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database schema."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS series (
                series_id TEXT PRIMARY KEY,
                metric_id TEXT NOT NULL,
                display_name TEXT,
                description TEXT,
                unit TEXT,
                frequency TEXT,
                last_updated TEXT NOT NULL
            )
        """)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS observations (
                series_id TEXT NOT NULL REFERENCES series(series_id),
                date TEXT NOT NULL,
                value REAL NOT NULL,
                PRIMARY KEY (series_id, date)
            )
        """)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS fetch_timestamps (
                series_id TEXT PRIMARY KEY,
                last_fetched_at TEXT NOT NULL
            )
        """)
        self._conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_series_metric
            ON series(metric_id)
        """)

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, functools.partial(func, *args)
        )

    async def close(self) -> None:
        """Close the connection and stop the worker thread."""
        await self._run(self._conn.close)
        self._executor.shutdown(wait=True)

    # -- reads -------------------------------------------------------------

    def _last_fetched(self, series_id: str) -> datetime | None:
        row = self._conn.execute(
            "SELECT last_fetched_at FROM fetch_timestamps WHERE series_id = ?",
            (series_id,),
        ).fetchone()
        if row is None:
            return None
        return datetime.fromisoformat(row["last_fetched_at"])

    def _is_stale(self, series_id: str) -> bool:
        return is_stale(self._last_fetched(series_id), self._clock(), self.freshness_days)

    def _read_cached(self, series_id: str) -> list[Observation] | None:
        if self._is_stale(series_id):
            return None

        rows = self._conn.execute(
            "SELECT date, value FROM observations WHERE series_id = ? ORDER BY date",
            (series_id,),
        ).fetchall()
        if not rows:
            return None

        return [
            Observation(date=date.fromisoformat(row["date"]), value=float(row["value"]))
            for row in rows
        ]

    def _read_should_fetch(self, series_id: str) -> bool:
        if self._is_stale(series_id):
            return True
        row = self._conn.execute(
            "SELECT COUNT(*) AS n FROM observations WHERE series_id = ?",
            (series_id,),
        ).fetchone()
        return row["n"] == 0

    async def get_cached(self, series_id: str) -> list[Observation] | None:
        """
        Return cached observations for a series.

        Returns:
            Observations in date order, or None when the series was never
            fetched, is stale, has no rows, or the cache could not be read
        """
        try:
            return await self._run(self._read_cached, series_id)
        except (sqlite3.Error, ValueError) as e:
            logger.warning(f"Error reading cached data for {series_id}: {e}")
            return None

    async def should_fetch(self, series_id: str) -> bool:
        """Check whether a series needs a fresh upstream fetch."""
        try:
            return await self._run(self._read_should_fetch, series_id)
        except (sqlite3.Error, ValueError) as e:
            logger.warning(f"Error checking freshness for {series_id}: {e}")
            return True

    async def get_fetch_timestamp(self, series_id: str) -> FetchTimestamp | None:
        try:
            last = await self._run(self._last_fetched, series_id)
        except (sqlite3.Error, ValueError) as e:
            logger.warning(f"Error reading fetch timestamp for {series_id}: {e}")
            return None
        if last is None:
            return None
        return FetchTimestamp(series_id=series_id, last_fetched_at=last)

    def _read_record(self, series_id: str) -> SeriesRecord | None:
        row = self._conn.execute(
            "SELECT * FROM series WHERE series_id = ?", (series_id,)
        ).fetchone()
        if row is None:
            return None
        return SeriesRecord(
            series_id=row["series_id"],
            metric_id=row["metric_id"],
            display_name=row["display_name"],
            description=row["description"],
            unit=row["unit"],
            frequency=row["frequency"],
            last_updated=datetime.fromisoformat(row["last_updated"]),
        )

    async def get_record(self, series_id: str) -> SeriesRecord | None:
        """Get stored metadata for a series."""
        try:
            return await self._run(self._read_record, series_id)
        except (sqlite3.Error, ValueError) as e:
            logger.warning(f"Error reading metadata for {series_id}: {e}")
            return None

    def _read_series_for_metric(self, metric_id: str) -> str | None:
        row = self._conn.execute(
            "SELECT series_id FROM series WHERE metric_id = ? ORDER BY series_id LIMIT 1",
            (metric_id,),
        ).fetchone()
        return row["series_id"] if row else None

    async def find_series_for_metric(self, metric_id: str) -> str | None:
        """Look up a previously cached series by its metric id."""
        try:
            return await self._run(self._read_series_for_metric, metric_id)
        except sqlite3.Error as e:
            logger.warning(f"Error getting series for metric {metric_id}: {e}")
            return None

    def _read_status(self) -> dict[str, dict]:
        rows = self._conn.execute("""
            SELECT
                s.series_id,
                s.metric_id,
                s.display_name,
                COUNT(o.date) as observation_count,
                MIN(o.date) as first_date,
                MAX(o.date) as last_date,
                f.last_fetched_at
            FROM series s
            LEFT JOIN observations o ON o.series_id = s.series_id
            LEFT JOIN fetch_timestamps f ON f.series_id = s.series_id
            GROUP BY s.series_id
        """).fetchall()

        return {
            row["series_id"]: {
                "metric_id": row["metric_id"],
                "title": row["display_name"],
                "observation_count": row["observation_count"],
                "first_date": row["first_date"],
                "last_date": row["last_date"],
                "last_fetched": row["last_fetched_at"],
            }
            for row in rows
        }

    async def get_cache_status(self) -> dict[str, dict]:
        """Get status of cached data for each series."""
        try:
            return await self._run(self._read_status)
        except sqlite3.Error as e:
            logger.warning(f"Error reading cache status: {e}")
            return {}

    # -- writes ------------------------------------------------------------

    def _write_replace(
        self,
        series_id: str,
        observations: list[Observation],
        metadata: SeriesMetadata,
    ) -> None:
        now = self._clock().isoformat()
        rows = [(series_id, obs.date.isoformat(), float(obs.value)) for obs in observations]

        self._conn.execute("BEGIN IMMEDIATE")
        try:
            self._conn.execute(
                """
                INSERT INTO series
                (series_id, metric_id, display_name, description, unit, frequency, last_updated)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(series_id) DO UPDATE SET
                    metric_id = excluded.metric_id,
                    display_name = excluded.display_name,
                    description = excluded.description,
                    unit = excluded.unit,
                    frequency = excluded.frequency,
                    last_updated = excluded.last_updated
                """,
                (
                    series_id,
                    metadata.metric_id,
                    metadata.display_name,
                    metadata.description,
                    metadata.unit,
                    metadata.frequency,
                    now,
                ),
            )
            self._conn.execute(
                "DELETE FROM observations WHERE series_id = ?", (series_id,)
            )
            # duplicate dates in the input: last one wins
            self._conn.executemany(
                """
                INSERT OR REPLACE INTO observations (series_id, date, value)
                VALUES (?, ?, ?)
                """,
                rows,
            )
            self._conn.execute(
                """
                INSERT INTO fetch_timestamps (series_id, last_fetched_at)
                VALUES (?, ?)
                ON CONFLICT(series_id) DO UPDATE SET
                    last_fetched_at = excluded.last_fetched_at
                """,
                (series_id, now),
            )
            self._conn.execute("COMMIT")
        except BaseException:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            raise

    async def replace(
        self,
        series_id: str,
        observations: list[Observation],
        metadata: SeriesMetadata,
    ) -> None:
        """
        Replace everything cached for a series in one transaction.

        Upserts the series metadata, swaps the full observation set and marks
        the series as fetched now. An empty observation list is a no-op.

        Raises:
            PersistenceError: If the write failed; nothing is changed
        """
        if not observations:
            return

        try:
            await self._run(self._write_replace, series_id, list(observations), metadata)
        except sqlite3.Error as e:
            logger.error(f"Error caching data for {series_id}: {e}")
            raise PersistenceError(series_id, str(e)) from e

        logger.info(f"Cached {len(observations)} observations for {series_id}")
