"""Configuration settings for the dashboard."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv

from econ_metrics_dashboard.errors import ConfigurationError


load_dotenv()


# Cached series older than this many days are refetched
DEFAULT_FRESHNESS_DAYS = 7.0

# Upper bound on a single FRED request, in seconds
DEFAULT_REQUEST_TIMEOUT = 15.0


def _default_cache_dir() -> Path:
    override = os.getenv("ECON_CACHE_DIR")
    if override:
        return Path(override)
    return Path(__file__).parent.parent.parent / "cache"


def _as_float(name: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


@dataclass
class Settings:
    """Application settings."""

    fred_api_key: str = field(default_factory=lambda: os.getenv("FRED_API_KEY", ""))
    freshness_days: float = field(
        default_factory=lambda: os.getenv("FRESHNESS_THRESHOLD_DAYS", DEFAULT_FRESHNESS_DAYS)
    )
    request_timeout: float = field(
        default_factory=lambda: os.getenv("FRED_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
    )
    cache_dir: Path = field(default_factory=_default_cache_dir)
    db_path: Path = field(init=False)

    def __post_init__(self) -> None:
        self.freshness_days = _as_float("FRESHNESS_THRESHOLD_DAYS", self.freshness_days)
        self.request_timeout = _as_float("FRED_REQUEST_TIMEOUT", self.request_timeout)
        self.cache_dir = Path(self.cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = self.cache_dir / "economic_data.db"

    def validate(self) -> None:
        """Validate required settings."""
        if not self.fred_api_key:
            raise ConfigurationError(
                "FRED_API_KEY not set. Get one at: "
                "https://fred.stlouisfed.org/docs/api/api_key.html"
            )

    def has_api_key(self) -> bool:
        """Check if a FRED API key is configured."""
        return bool(self.fred_api_key)
