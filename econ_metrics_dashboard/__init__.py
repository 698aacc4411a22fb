"""Economic metrics dashboard: FRED series with a local SQLite cache."""

__version__ = "0.1.0"
