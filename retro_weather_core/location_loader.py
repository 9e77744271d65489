"""Loaders for the location weather pages.

The location itself is must-have data; hazards, the nearest station and its
latest observation are best-effort and never fail the load.
"""

from __future__ import annotations

import logging
import math

from .errors import create_api_error, create_validation_error
from .loader import LoaderResult, with_error_handling, with_graceful_fallback
from .models import (
    Coordinates,
    CurrentConditions,
    ForecastDay,
    LocationInfo,
    LocationWeather,
    Observation,
    Station,
)
from .nws import NwsClient
from .weather_cache import WeatherCache, WeatherCacheData

_LOGGER = logging.getLogger(__name__)


def parse_coordinates(coords: str) -> Coordinates:
    """Parse a ``"lat,lon"`` string.

    Raises:
        WeatherValidationError: If the string is malformed or out of range.
    """
    parts = coords.split(",") if coords else []
    if len(parts) != 2:
        raise create_validation_error('Invalid coordinates format: expected "lat,lon"')

    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError as err:
        raise create_validation_error(
            "Invalid coordinate values: must be valid numbers"
        ) from err
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise create_validation_error("Invalid coordinate values: must be valid numbers")

    if not -90 <= lat <= 90:
        raise create_validation_error("Invalid latitude: must be between -90 and 90")
    if not -180 <= lon <= 180:
        raise create_validation_error("Invalid longitude: must be between -180 and 180")
    return Coordinates(lat=lat, lon=lon)


async def _load_current_conditions(
    client: NwsClient, location: LocationInfo
) -> tuple[Station | None, Observation | None]:
    stations = await client.get_stations_by_gridpoint(
        location.grid_id, location.grid_x, location.grid_y
    )
    if not stations:
        _LOGGER.debug("No observation stations for %s", location.grid_id)
        return None, None

    # Closest station first
    station = stations[0]
    observation = await with_graceful_fallback(
        lambda: client.get_latest_observation(station.id),
        None,
        f"Failed to fetch observation for {station.id}",
    )
    return station, observation


async def load_location_weather(
    client: NwsClient, coords: str, cache: WeatherCache | None = None
) -> LoaderResult[LocationWeather]:
    """Load location, hazards and current conditions for ``coords``.

    When ``cache`` is given, current conditions are served from it while
    fresh and stored into it after a successful fetch.
    """

    async def load() -> LocationWeather:
        point = parse_coordinates(coords)
        location = await client.get_location_by_point(point.lat, point.lon)

        hazards = await with_graceful_fallback(
            lambda: client.get_alerts_by_point(point.lat, point.lon),
            [],
            "Failed to fetch hazards",
        )

        cached = cache.get(point.lat, point.lon) if cache is not None else None
        if cached is not None:
            station, observation = cached.station, cached.observation
        else:
            station, observation = await with_graceful_fallback(
                lambda: _load_current_conditions(client, location),
                (None, None),
                "Failed to fetch station",
            )
            if cache is not None and observation is not None:
                cache.set(
                    point.lat,
                    point.lon,
                    WeatherCacheData(observation=observation, station=station),
                )

        return LocationWeather(
            location=location,
            coords=coords,
            hazards=hazards,
            station=station,
            observation=observation,
        )

    return await with_error_handling(load, "Failed to load location data")


async def load_forecast(client: NwsClient, coords: str) -> LoaderResult[list[ForecastDay]]:
    """Load the forecast periods for ``coords``."""

    async def load() -> list[ForecastDay]:
        point = parse_coordinates(coords)
        location = await client.get_location_by_point(point.lat, point.lon)
        return await client.get_forecast_by_url(location.forecast)

    return await with_error_handling(load, "Failed to load forecast")


async def load_current_conditions(
    client: NwsClient, location: LocationInfo, coords: str
) -> LoaderResult[CurrentConditions]:
    """Load the nearest station and its latest observation.

    The station is returned even when its observation cannot be fetched.
    """
    if not location.observation_stations:
        return LoaderResult(
            data=None,
            error=create_api_error(
                "No observation stations available for this location", 404
            ),
        )

    async def load() -> CurrentConditions:
        station, observation = await _load_current_conditions(client, location)
        return CurrentConditions(coords=coords, station=station, observation=observation)

    return await with_error_handling(load, "Failed to load current weather conditions")
