"""Pytest configuration and fixtures for retro_weather_core tests."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


@pytest.fixture
def no_backoff(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Replace the backoff sleep so retries run instantly."""
    sleep = AsyncMock()
    monkeypatch.setattr("retro_weather_core.http._backoff_sleep", sleep)
    return sleep


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def create_mock_response(
    status: int = 200,
    json_data: Any = None,
    text_data: str | None = None,
    reason: str | None = None,
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        json_data: Data returned (JSON-encoded) from read()
        text_data: Raw body returned from read(), used if json_data is None
        reason: HTTP reason phrase

    Returns:
        Configured AsyncMock response usable as ``async with session.get(...)``
    """
    response = AsyncMock()
    response.status = status
    response.reason = reason
    response.headers = {"Content-Type": "application/geo+json"}

    if json_data is not None:
        body = json.dumps(json_data).encode()
    elif text_data is not None:
        body = text_data.encode()
    else:
        body = b""
    response.read.return_value = body

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


POINTS_PAYLOAD: dict[str, Any] = {
    "@context": ["https://geojson.org/geojson-ld/geojson-context.jsonld"],
    "properties": {
        "forecast": "https://api.weather.gov/gridpoints/BOX/71,90/forecast",
        "forecastHourly": "https://api.weather.gov/gridpoints/BOX/71,90/forecast/hourly",
        "observationStations": "https://api.weather.gov/gridpoints/BOX/71,90/stations",
        "gridId": "BOX",
        "gridX": 71,
        "gridY": 90,
        "timeZone": "America/New_York",
    },
}

STATIONS_PAYLOAD: dict[str, Any] = {
    "features": [
        {
            "properties": {
                "stationIdentifier": "KBOS",
                "name": "Boston, Logan International Airport",
            }
        },
        {"properties": {"stationIdentifier": "KPWM"}},
    ]
}

OBSERVATION_PAYLOAD: dict[str, Any] = {
    "properties": {
        "timestamp": "2025-10-02T14:54:00+00:00",
        "textDescription": "Partly Cloudy",
        "icon": "https://api.weather.gov/icons/land/day/sct?size=medium",
        "temperature": {"unitCode": "wmoUnit:degC", "value": 15.5},
        "dewpoint": {"unitCode": "wmoUnit:degC", "value": 8.2},
        "windDirection": {"unitCode": "wmoUnit:degree_(angle)", "value": 180},
        "windSpeed": {"unitCode": "wmoUnit:km_h-1", "value": 5.2},
        "visibility": {"unitCode": "wmoUnit:m", "value": 16090},
        "relativeHumidity": {"unitCode": "wmoUnit:percent", "value": 65},
        "windChill": {"unitCode": "wmoUnit:degC", "value": None},
    }
}

FORECAST_PAYLOAD: dict[str, Any] = {
    "properties": {
        "periods": [
            {
                "number": 1,
                "name": "Today",
                "startTime": "2025-10-02T10:00:00-04:00",
                "isDaytime": True,
                "temperature": 72,
                "temperatureUnit": "F",
                "shortForecast": "Partly Cloudy",
                "detailedForecast": "Partly cloudy, with a high near 72.",
                "icon": "https://api.weather.gov/icons/land/day/sct?size=medium",
            },
            {
                "number": 2,
                "name": "Tonight",
                "startTime": "2025-10-02T18:00:00-04:00",
                "isDaytime": False,
                "temperature": 55,
                "shortForecast": "Mostly Clear",
            },
        ]
    }
}

ALERTS_PAYLOAD: dict[str, Any] = {
    "features": [
        {
            "properties": {
                "headline": "Wind Advisory issued October 2 at 3:00PM EDT",
                "description": "West winds 20 to 30 mph with gusts up to 50 mph.",
                "severity": "Moderate",
                "urgency": "Expected",
                "certainty": "Likely",
                "areaDesc": "Suffolk; Norfolk",
                "event": "Wind Advisory",
            }
        }
    ]
}
