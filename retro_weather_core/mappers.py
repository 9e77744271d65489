"""Map validated NWS payloads to domain models.

Every function is total over its validated input: optional or null upstream
fields become None, and a missing station name falls back to the station
identifier. Nothing here raises or performs I/O.
"""

from __future__ import annotations

from .dto import (
    AlertsResponse,
    ForecastResponse,
    ObservationResponse,
    PointsResponse,
    QuantitativeValue,
    StationsResponse,
)
from .models import ForecastDay, Hazard, LocationInfo, Observation, Station


def map_points(dto: PointsResponse) -> LocationInfo:
    p = dto["properties"]
    return LocationInfo(
        forecast=p["forecast"],
        forecast_hourly=p["forecastHourly"],
        observation_stations=p["observationStations"],
        grid_id=p["gridId"],
        grid_x=p["gridX"],
        grid_y=p["gridY"],
    )


def map_stations(dto: StationsResponse) -> list[Station]:
    stations: list[Station] = []
    for feature in dto["features"]:
        props = feature["properties"]
        station_id = props["stationIdentifier"]
        stations.append(Station(id=station_id, name=props.get("name") or station_id))
    return stations


def _value(quantity: QuantitativeValue | None) -> float | None:
    if not quantity:
        return None
    return quantity.get("value")


def map_observation(dto: ObservationResponse) -> Observation:
    p = dto["properties"]
    return Observation(
        temperature_c=_value(p.get("temperature")),
        text_description=p.get("textDescription"),
        relative_humidity=_value(p.get("relativeHumidity")),
        dewpoint_c=_value(p.get("dewpoint")),
        visibility_m=_value(p.get("visibility")),
        wind_chill_c=_value(p.get("windChill")),
        wind_direction_deg=_value(p.get("windDirection")),
        wind_speed_kmh=_value(p.get("windSpeed")),
        icon=p.get("icon"),
        timestamp=p.get("timestamp"),
    )


def map_forecast(dto: ForecastResponse) -> list[ForecastDay]:
    return [
        ForecastDay(
            day_name=period["name"],
            start_time=period["startTime"],
            is_daytime=period["isDaytime"],
            temperature=period["temperature"],
            short_forecast=period["shortForecast"],
            detailed_forecast=period.get("detailedForecast"),
            icon=period.get("icon"),
        )
        for period in dto["properties"]["periods"]
    ]


def map_alerts(dto: AlertsResponse) -> list[Hazard]:
    hazards: list[Hazard] = []
    for feature in dto["features"]:
        props = feature["properties"]
        hazards.append(
            Hazard(
                headline=props["headline"],
                description=props.get("description"),
                severity=props.get("severity"),
                urgency=props.get("urgency"),
                certainty=props.get("certainty"),
                areas=props.get("areaDesc"),
            )
        )
    return hazards
