"""Internal domain models.

These are the stable shapes handed to everything outside the data access
core. They are only ever built by ``mappers`` from validated payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class LocationInfo:
    """NWS gridpoint metadata for a coordinate pair."""

    forecast: str
    forecast_hourly: str
    observation_stations: str
    grid_id: str
    grid_x: int
    grid_y: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "forecast": self.forecast,
            "forecast_hourly": self.forecast_hourly,
            "observation_stations": self.observation_stations,
            "grid_id": self.grid_id,
            "grid_x": self.grid_x,
            "grid_y": self.grid_y,
        }


@dataclass(frozen=True)
class Station:
    """An observation station. ``name`` falls back to ``id``."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


# Measurement fields that are omitted from to_dict() when unknown
_OBSERVATION_MEASUREMENTS = (
    "temperature_c",
    "relative_humidity",
    "dewpoint_c",
    "visibility_m",
    "wind_chill_c",
    "wind_direction_deg",
    "wind_speed_kmh",
)


@dataclass(frozen=True)
class Observation:
    """Latest conditions reported by a station.

    Measurements are None when the station did not report them (absent or
    null upstream) and are left out of ``to_dict()``. ``text_description``,
    ``icon`` and ``timestamp`` are always present in ``to_dict()`` and may be
    None.

    Attributes:
        temperature_c: Air temperature (degC).
        text_description: Short condition summary, e.g. "Partly Cloudy".
        relative_humidity: Relative humidity (percent, 0-100).
        dewpoint_c: Dewpoint (degC).
        visibility_m: Visibility (meters).
        wind_chill_c: Wind chill (degC).
        wind_direction_deg: Wind direction (degrees, 0-360).
        wind_speed_kmh: Wind speed (km/h).
        icon: NWS icon URL.
        timestamp: ISO-8601 observation time.
    """

    temperature_c: float | None = None
    text_description: str | None = None
    relative_humidity: float | None = None
    dewpoint_c: float | None = None
    visibility_m: float | None = None
    wind_chill_c: float | None = None
    wind_direction_deg: float | None = None
    wind_speed_kmh: float | None = None
    icon: str | None = None
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "text_description": self.text_description,
            "icon": self.icon,
            "timestamp": self.timestamp,
        }
        for name in _OBSERVATION_MEASUREMENTS:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result


@dataclass(frozen=True)
class ForecastDay:
    """One forecast period (day or night)."""

    day_name: str
    start_time: str
    is_daytime: bool
    temperature: float
    short_forecast: str
    detailed_forecast: str | None = None
    icon: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "day_name": self.day_name,
            "start_time": self.start_time,
            "is_daytime": self.is_daytime,
            "temperature": self.temperature,
            "short_forecast": self.short_forecast,
            "icon": self.icon,
        }
        if self.detailed_forecast is not None:
            result["detailed_forecast"] = self.detailed_forecast
        return result


@dataclass(frozen=True)
class Hazard:
    """An active weather alert."""

    headline: str
    description: str | None = None
    severity: str | None = None
    urgency: str | None = None
    certainty: str | None = None
    areas: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"headline": self.headline}
        for name in ("description", "severity", "urgency", "certainty", "areas"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result


@dataclass(frozen=True)
class Coordinates:
    """A validated latitude/longitude pair."""

    lat: float
    lon: float

    def __str__(self) -> str:
        return f"{self.lat},{self.lon}"


@dataclass
class LocationWeather:
    """Everything the location pages need for one coordinate pair."""

    location: LocationInfo
    coords: str
    hazards: list[Hazard] = field(default_factory=lambda: list[Hazard]())
    station: Station | None = None
    observation: Observation | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "coords": self.coords,
            "hazards": [hazard.to_dict() for hazard in self.hazards],
            "station": self.station.to_dict() if self.station else None,
            "observation": self.observation.to_dict() if self.observation else None,
        }


@dataclass
class CurrentConditions:
    """Nearest station and its latest observation for one coordinate pair."""

    coords: str
    station: Station | None = None
    observation: Observation | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "coords": self.coords,
            "station": self.station.to_dict() if self.station else None,
            "observation": self.observation.to_dict() if self.observation else None,
        }
