"""Data models for economic time series."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Observation:
    """Single (date, value) sample of a series."""

    date: date
    value: float

    def to_dict(self) -> dict:
        """Serialize with the date in YYYY-MM-DD form."""
        return {"date": self.date.isoformat(), "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Observation":
        raw_date = data["date"]
        if isinstance(raw_date, str):
            raw_date = date.fromisoformat(raw_date[:10])
        return cls(date=raw_date, value=float(data["value"]))


@dataclass
class SeriesMetadata:
    """Descriptive metadata written alongside a cached series."""

    series_id: str
    metric_id: str
    display_name: str
    description: str
    unit: str
    frequency: str


@dataclass
class SeriesRecord(SeriesMetadata):
    """Persisted metadata row for a cached series."""

    last_updated: datetime | None = None


@dataclass
class FetchTimestamp:
    """Last time a series was successfully fetched and stored."""

    series_id: str
    last_fetched_at: datetime
