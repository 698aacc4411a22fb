"""Exceptions raised by the data layer."""


class DashboardError(Exception):
    """Base class for all dashboard data errors."""


class ConfigurationError(DashboardError, ValueError):
    """Required configuration (e.g. the FRED API key) is missing."""


class UpstreamFetchError(DashboardError):
    """A request to the FRED API failed.

    ``transport`` is True when the request never produced an HTTP response
    (connection error, timeout). Otherwise ``status_code`` holds the HTTP
    status of the failed or undecodable response.
    """

    def __init__(
        self,
        series_id: str,
        message: str,
        status_code: int | None = None,
        transport: bool = False,
    ) -> None:
        self.series_id = series_id
        self.status_code = status_code
        self.transport = transport
        super().__init__(f"Failed to fetch {series_id} from FRED: {message}")


class PersistenceError(DashboardError):
    """Writing a series to the local cache failed."""

    def __init__(self, series_id: str, message: str) -> None:
        self.series_id = series_id
        super().__init__(f"Could not cache {series_id}: {message}")
