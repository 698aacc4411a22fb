"""Series data models."""

from .series import FetchTimestamp, Observation, SeriesMetadata, SeriesRecord

__all__ = ["Observation", "SeriesMetadata", "SeriesRecord", "FetchTimestamp"]
