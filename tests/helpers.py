"""Test doubles and builders."""

from datetime import date, datetime, timedelta

import httpx

from econ_metrics_dashboard.models import Observation


class FakeClock:
    """Controllable replacement for the store's clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: float) -> None:
        self.now += timedelta(days=days)


class RecordingHandler:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, status_code: int = 200, json_body=None, exc: Exception | None = None) -> None:
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else {"observations": []}
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.json_body)


def fred_payload(*points: tuple[str, str]) -> dict:
    return {"observations": [{"date": d, "value": v} for d, v in points]}


def obs(day: str, value: float) -> Observation:
    return Observation(date=date.fromisoformat(day), value=value)
