"""NWS API payload shapes after validation.

Only the fields this package reads are described; anything else the API
sends is dropped by the validators.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict


class PointsProperties(TypedDict):
    forecast: str
    forecastHourly: str
    observationStations: str
    gridId: str
    gridX: int
    gridY: int


class PointsResponse(TypedDict):
    properties: PointsProperties


class StationProperties(TypedDict):
    stationIdentifier: str
    name: NotRequired[str]


class StationFeature(TypedDict):
    properties: StationProperties


class StationsResponse(TypedDict):
    features: list[StationFeature]


class QuantitativeValue(TypedDict):
    value: NotRequired[float | None]


class ObservationProperties(TypedDict, total=False):
    temperature: QuantitativeValue | None
    textDescription: str | None
    relativeHumidity: QuantitativeValue | None
    dewpoint: QuantitativeValue | None
    visibility: QuantitativeValue | None
    windChill: QuantitativeValue | None
    windDirection: QuantitativeValue | None
    windSpeed: QuantitativeValue | None
    icon: str | None
    timestamp: str | None


class ObservationResponse(TypedDict):
    properties: ObservationProperties


class ForecastPeriod(TypedDict):
    name: str
    startTime: str
    isDaytime: bool
    temperature: float
    shortForecast: str
    detailedForecast: NotRequired[str]
    icon: NotRequired[str | None]


class ForecastProperties(TypedDict):
    periods: list[ForecastPeriod]


class ForecastResponse(TypedDict):
    properties: ForecastProperties


class AlertProperties(TypedDict):
    headline: str
    description: NotRequired[str]
    severity: NotRequired[str]
    urgency: NotRequired[str]
    certainty: NotRequired[str]
    areaDesc: NotRequired[str]


class AlertFeature(TypedDict):
    properties: AlertProperties


class AlertsResponse(TypedDict):
    features: list[AlertFeature]
