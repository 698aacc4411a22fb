"""Async FRED API client."""

import logging
import math
from datetime import date

import httpx

from econ_metrics_dashboard.config import DEFAULT_REQUEST_TIMEOUT, Settings
from econ_metrics_dashboard.errors import UpstreamFetchError
from econ_metrics_dashboard.models import Observation


logger = logging.getLogger(__name__)


DEFAULT_OBSERVATION_START = date(1900, 1, 1)


def parse_observations(observations: object) -> list[Observation]:
    """
    Convert raw FRED observations into Observation objects.

    FRED reports missing values with placeholder strings such as ".". Any
    entry whose value is not a finite number, or whose date is not
    YYYY-MM-DD, is dropped.
    """
    if not isinstance(observations, list):
        return []

    parsed = []
    for raw in observations:
        if not isinstance(raw, dict):
            continue
        try:
            obs_date = date.fromisoformat(str(raw["date"]))
            value = float(raw["value"])
        except (KeyError, TypeError, ValueError):
            continue
        if not math.isfinite(value):
            continue
        parsed.append(Observation(date=obs_date, value=value))
    return parsed


class FredClient:
    """Fetches series observations from the FRED API."""

    BASE_URL = "https://api.stlouisfed.org/fred"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key or ""
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: Settings) -> "FredClient":
        return cls(api_key=settings.fred_api_key, timeout=settings.request_timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        """Close HTTP client."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FredClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def fetch(
        self,
        series_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Observation]:
        """
        Fetch observations for one series.

        Args:
            series_id: FRED series ID
            start: First observation date (default 1900-01-01)
            end: Last observation date (default today)

        Returns:
            Parsed observations; empty when no API key is configured or FRED
            has no data for the range

        Raises:
            UpstreamFetchError: On network failure, timeout, a non-2xx
                response or a body that is not JSON
        """
        if not self.api_key:
            logger.warning(f"FRED API key not configured, skipping fetch of {series_id}")
            return []

        params = {
            "series_id": series_id,
            "api_key": self.api_key,
            "file_type": "json",
            "observation_start": (start or DEFAULT_OBSERVATION_START).isoformat(),
            "observation_end": (end or date.today()).isoformat(),
        }

        logger.info(f"Fetching {series_id} from FRED...")
        try:
            response = await self.client.get(
                f"{self.BASE_URL}/series/observations",
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamFetchError(
                series_id, f"HTTP {status}", status_code=status
            ) from e
        except httpx.RequestError as e:
            # the request URL carries the API key, so only the error type is reported
            raise UpstreamFetchError(
                series_id, f"{type(e).__name__}", transport=True
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFetchError(
                series_id, "response is not valid JSON", status_code=response.status_code
            ) from e

        raw = data.get("observations", []) if isinstance(data, dict) else []
        observations = parse_observations(raw)

        dropped = len(raw) - len(observations) if isinstance(raw, list) else 0
        if dropped:
            logger.debug(f"  Dropped {dropped} missing or malformed observations")
        logger.info(f"  Received {len(observations)} observations for {series_id}")
        return observations
