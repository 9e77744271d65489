"""Structural validation of NWS API payloads.

Each payload family is described by a schema built from the rule types
below and checked by one generic routine, ``validate``. Validation never
mutates its input: the validated value is a copy holding only the declared
fields, so unknown fields sent by the API are ignored.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar, cast

from .dto import (
    AlertsResponse,
    ForecastResponse,
    ObservationResponse,
    PointsResponse,
    StationsResponse,
)

T = TypeVar("T")

FORMAT_URL = "url"
FORMAT_ISO8601 = "iso8601"

_URL_RE = re.compile(r"https?://[^\s/?#]+[^\s]*")


# ---------------------------------------------------------------------------
# Schema description
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StringRule:
    pattern: str | None = None
    fmt: str | None = None


@dataclass(frozen=True, slots=True)
class NumberRule:
    minimum: float | None = None
    maximum: float | None = None
    integer: bool = False


@dataclass(frozen=True, slots=True)
class BoolRule:
    pass


@dataclass(frozen=True, slots=True)
class EnumRule:
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Field:
    """A named object member and its constraints."""

    name: str
    rule: Rule
    optional: bool = False
    nullable: bool = False


@dataclass(frozen=True, slots=True)
class ObjectRule:
    fields: tuple[Field, ...]


@dataclass(frozen=True, slots=True)
class ListRule:
    item: Rule


Rule = StringRule | NumberRule | BoolRule | EnumRule | ObjectRule | ListRule


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A single violated constraint.

    Attributes:
        path: Location of the offending value, e.g. "$.properties.gridX".
        constraint: Which constraint failed ("required", "type", "format",
            "pattern", "minimum", "maximum", "integer", "enum", "nullable").
        message: Human-readable description.
    """

    path: str
    constraint: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "constraint": self.constraint, "message": self.message}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Outcome of validating a payload. ``value`` is only meaningful if ok."""

    value: T | None
    issues: list[ValidationIssue] = field(default_factory=lambda: list[ValidationIssue]())

    @property
    def ok(self) -> bool:
        return not self.issues

    def describe(self) -> str:
        return "; ".join(f"{issue.path}: {issue.message}" for issue in self.issues)


# ---------------------------------------------------------------------------
# Generic routine
# ---------------------------------------------------------------------------


def validate(rule: Rule, payload: Any, path: str = "$") -> ValidationResult[Any]:
    """Check ``payload`` against ``rule``."""
    issues: list[ValidationIssue] = []
    value = _check(rule, payload, path, issues)
    if issues:
        return ValidationResult(value=None, issues=issues)
    return ValidationResult(value=value)


def _check(rule: Rule, value: Any, path: str, issues: list[ValidationIssue]) -> Any:
    if isinstance(rule, ObjectRule):
        return _check_object(rule, value, path, issues)
    if isinstance(rule, ListRule):
        if not isinstance(value, list):
            issues.append(ValidationIssue(path, "type", "expected array"))
            return None
        return [_check(rule.item, item, f"{path}[{i}]", issues) for i, item in enumerate(value)]
    if isinstance(rule, StringRule):
        _check_string(rule, value, path, issues)
        return value
    if isinstance(rule, NumberRule):
        return _check_number(rule, value, path, issues)
    if isinstance(rule, BoolRule):
        if not isinstance(value, bool):
            issues.append(ValidationIssue(path, "type", "expected boolean"))
        return value
    if isinstance(rule, EnumRule):
        if value not in rule.values:
            issues.append(
                ValidationIssue(
                    path, "enum", f"expected one of {', '.join(rule.values)}, got {value!r}"
                )
            )
        return value
    raise TypeError(f"Unsupported rule: {rule!r}")


def _check_object(
    rule: ObjectRule, value: Any, path: str, issues: list[ValidationIssue]
) -> dict[str, Any] | None:
    if not isinstance(value, dict):
        issues.append(ValidationIssue(path, "type", "expected object"))
        return None

    result: dict[str, Any] = {}
    for member in rule.fields:
        member_path = f"{path}.{member.name}"
        if member.name not in value:
            if not member.optional:
                issues.append(ValidationIssue(member_path, "required", "field is required"))
            continue
        member_value = value[member.name]
        if member_value is None:
            if member.nullable:
                result[member.name] = None
            else:
                issues.append(ValidationIssue(member_path, "nullable", "must not be null"))
            continue
        result[member.name] = _check(member.rule, member_value, member_path, issues)
    return result


def _check_string(
    rule: StringRule, value: Any, path: str, issues: list[ValidationIssue]
) -> None:
    if not isinstance(value, str):
        issues.append(ValidationIssue(path, "type", "expected string"))
        return
    if rule.pattern is not None and re.fullmatch(rule.pattern, value) is None:
        issues.append(
            ValidationIssue(path, "pattern", f"does not match {rule.pattern!r}")
        )
    if rule.fmt == FORMAT_URL and _URL_RE.fullmatch(value) is None:
        issues.append(ValidationIssue(path, "format", "expected an http(s) URL"))
    elif rule.fmt == FORMAT_ISO8601 and not _is_iso8601(value):
        issues.append(ValidationIssue(path, "format", "expected an ISO-8601 timestamp"))


def _is_iso8601(value: str) -> bool:
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _check_number(
    rule: NumberRule, value: Any, path: str, issues: list[ValidationIssue]
) -> Any:
    # bool is an int subclass; JSON true/false is never a number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        issues.append(ValidationIssue(path, "type", "expected number"))
        return value
    if not math.isfinite(value):
        issues.append(ValidationIssue(path, "type", "expected a finite number"))
        return value
    if rule.integer:
        if isinstance(value, float) and not value.is_integer():
            issues.append(ValidationIssue(path, "integer", "expected an integer"))
            return value
        value = int(value)
    if rule.minimum is not None and value < rule.minimum:
        issues.append(ValidationIssue(path, "minimum", f"must be >= {rule.minimum}"))
    if rule.maximum is not None and value > rule.maximum:
        issues.append(ValidationIssue(path, "maximum", f"must be <= {rule.maximum}"))
    return value


# ---------------------------------------------------------------------------
# NWS schemas
# ---------------------------------------------------------------------------

ALERT_SEVERITIES = ("Extreme", "Severe", "Moderate", "Minor", "Unknown")
ALERT_URGENCIES = ("Immediate", "Expected", "Future", "Past", "Unknown")
ALERT_CERTAINTIES = ("Observed", "Likely", "Possible", "Unlikely", "Unknown")

_URL = StringRule(fmt=FORMAT_URL)
_TIMESTAMP = StringRule(fmt=FORMAT_ISO8601)


def _quantity(minimum: float | None = None, maximum: float | None = None) -> ObjectRule:
    return ObjectRule(
        (
            Field(
                "value",
                NumberRule(minimum=minimum, maximum=maximum),
                optional=True,
                nullable=True,
            ),
        )
    )


POINTS_SCHEMA = ObjectRule(
    (
        Field(
            "properties",
            ObjectRule(
                (
                    Field("forecast", _URL),
                    Field("forecastHourly", _URL),
                    Field("observationStations", _URL),
                    Field("gridId", StringRule(pattern=r"[A-Z0-9]{3}")),
                    Field("gridX", NumberRule(minimum=0, integer=True)),
                    Field("gridY", NumberRule(minimum=0, integer=True)),
                )
            ),
        ),
    )
)

STATIONS_SCHEMA = ObjectRule(
    (
        Field(
            "features",
            ListRule(
                ObjectRule(
                    (
                        Field(
                            "properties",
                            ObjectRule(
                                (
                                    Field("stationIdentifier", StringRule(pattern=r"\S+")),
                                    Field("name", StringRule(), optional=True),
                                )
                            ),
                        ),
                    )
                )
            ),
        ),
    )
)

OBSERVATION_SCHEMA = ObjectRule(
    (
        Field(
            "properties",
            ObjectRule(
                (
                    Field("temperature", _quantity(), optional=True, nullable=True),
                    Field("textDescription", StringRule(), optional=True, nullable=True),
                    Field(
                        "relativeHumidity",
                        _quantity(0, 100),
                        optional=True,
                        nullable=True,
                    ),
                    Field("dewpoint", _quantity(), optional=True, nullable=True),
                    Field("visibility", _quantity(minimum=0), optional=True, nullable=True),
                    Field("windChill", _quantity(), optional=True, nullable=True),
                    Field(
                        "windDirection", _quantity(0, 360), optional=True, nullable=True
                    ),
                    Field("windSpeed", _quantity(minimum=0), optional=True, nullable=True),
                    Field("icon", StringRule(), optional=True, nullable=True),
                    Field("timestamp", _TIMESTAMP, optional=True, nullable=True),
                )
            ),
        ),
    )
)

FORECAST_SCHEMA = ObjectRule(
    (
        Field(
            "properties",
            ObjectRule(
                (
                    Field(
                        "periods",
                        ListRule(
                            ObjectRule(
                                (
                                    Field("name", StringRule()),
                                    Field("startTime", _TIMESTAMP),
                                    Field("isDaytime", BoolRule()),
                                    Field("temperature", NumberRule()),
                                    Field("shortForecast", StringRule()),
                                    Field("detailedForecast", StringRule(), optional=True),
                                    Field("icon", StringRule(), optional=True, nullable=True),
                                )
                            )
                        ),
                    ),
                )
            ),
        ),
    )
)

ALERTS_SCHEMA = ObjectRule(
    (
        Field(
            "features",
            ListRule(
                ObjectRule(
                    (
                        Field(
                            "properties",
                            ObjectRule(
                                (
                                    Field("headline", StringRule()),
                                    Field("description", StringRule(), optional=True),
                                    Field("severity", EnumRule(ALERT_SEVERITIES), optional=True),
                                    Field("urgency", EnumRule(ALERT_URGENCIES), optional=True),
                                    Field(
                                        "certainty", EnumRule(ALERT_CERTAINTIES), optional=True
                                    ),
                                    Field("areaDesc", StringRule(), optional=True),
                                )
                            ),
                        ),
                    )
                )
            ),
        ),
    )
)


def validate_points(payload: Any) -> ValidationResult[PointsResponse]:
    return cast(ValidationResult[PointsResponse], validate(POINTS_SCHEMA, payload))


def validate_stations(payload: Any) -> ValidationResult[StationsResponse]:
    return cast(ValidationResult[StationsResponse], validate(STATIONS_SCHEMA, payload))


def validate_observation(payload: Any) -> ValidationResult[ObservationResponse]:
    return cast(
        ValidationResult[ObservationResponse], validate(OBSERVATION_SCHEMA, payload)
    )


def validate_forecast(payload: Any) -> ValidationResult[ForecastResponse]:
    return cast(ValidationResult[ForecastResponse], validate(FORECAST_SCHEMA, payload))


def validate_alerts(payload: Any) -> ValidationResult[AlertsResponse]:
    return cast(ValidationResult[AlertsResponse], validate(ALERTS_SCHEMA, payload))
