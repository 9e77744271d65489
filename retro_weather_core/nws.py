"""National Weather Service API client.

Each call goes fetch -> JSON decode -> validate -> map, and raises a typed
``WeatherError`` on any failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import aiohttp

from .const import COORD_PRECISION, GEO_JSON, NWS_BASE_URL
from .errors import create_api_error, create_validation_error
from .http import DEFAULT_RETRY, RetryPolicy, fetch_with_retry
from .mappers import map_alerts, map_forecast, map_observation, map_points, map_stations
from .models import ForecastDay, Hazard, LocationInfo, Observation, Station
from .validators import (
    ValidationResult,
    validate_alerts,
    validate_forecast,
    validate_observation,
    validate_points,
    validate_stations,
)

_LOGGER = logging.getLogger(__name__)

D = TypeVar("D")
M = TypeVar("M")


def format_point(lat: float, lon: float) -> str:
    """Render a coordinate pair the way NWS URLs and cache keys expect."""
    return f"{lat:.{COORD_PRECISION}f},{lon:.{COORD_PRECISION}f}"


class NwsClient:
    """Client for the api.weather.gov endpoints used by the app."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        base_url: str = NWS_BASE_URL,
        retry: RetryPolicy = DEFAULT_RETRY,
    ) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._retry = retry

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def get_location_by_point(self, lat: float, lon: float) -> LocationInfo:
        """Resolve a coordinate pair to its forecast grid and endpoints."""
        url = self._url(f"/points/{format_point(lat, lon)}")
        return await self._get(url, "Points", validate_points, map_points)

    async def get_stations_by_gridpoint(
        self, grid_id: str, x: int, y: int
    ) -> list[Station]:
        """List observation stations for a grid cell, closest first."""
        url = self._url(f"/gridpoints/{grid_id}/{x},{y}/stations")
        return await self._get(url, "Stations", validate_stations, map_stations)

    async def get_latest_observation(self, station_id: str) -> Observation:
        url = self._url(f"/stations/{station_id}/observations/latest")
        return await self._get(
            url, "Observation", validate_observation, map_observation
        )

    async def get_forecast_by_url(self, forecast_url: str) -> list[ForecastDay]:
        """Fetch forecast periods from a URL returned by the points endpoint."""
        return await self._get(forecast_url, "Forecast", validate_forecast, map_forecast)

    async def get_alerts_by_point(self, lat: float, lon: float) -> list[Hazard]:
        url = self._url(f"/alerts/active?point={format_point(lat, lon)}")
        return await self._get(url, "Alerts", validate_alerts, map_alerts)

    async def _get(
        self,
        url: str,
        label: str,
        validator: Callable[[Any], ValidationResult[D]],
        mapper: Callable[[D], M],
    ) -> M:
        """Fetch, validate and map one endpoint.

        Raises:
            WeatherApiError: If the API returned a non-ok status.
            WeatherValidationError: If the body is not JSON or fails validation.
            WeatherTimeout: If the request timed out.
            WeatherNetworkError: If every attempt failed.
        """
        response = await fetch_with_retry(
            self._session, url, headers={"Accept": GEO_JSON}, policy=self._retry
        )

        if not response.ok:
            raise create_api_error(
                f"{label} request failed: {response.status} {response.reason or ''}".rstrip(),
                response.status,
            )

        try:
            payload = response.json()
        except ValueError as err:
            _LOGGER.error("%s response from %s is not JSON: %s", label, url, err)
            raise create_validation_error(
                f"Invalid {label.lower()} response from NWS API: body is not JSON",
                str(err),
            ) from err

        result = validator(payload)
        if not result.ok or result.value is None:
            _LOGGER.error("%s validation failed: %s", label, result.describe())
            raise create_validation_error(
                f"Invalid {label.lower()} response from NWS API",
                [issue.to_dict() for issue in result.issues],
            )

        return mapper(result.value)
