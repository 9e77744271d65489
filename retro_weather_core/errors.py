"""Typed error taxonomy for weather data access.

Every failure is classified once, where it happens, into one of the kinds
below. Retryability is derived from the kind (and, for API errors, the HTTP
status) and never set by hand.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    VALIDATION = "VALIDATION"
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


_RETRYABLE_KINDS = frozenset({ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT})


class WeatherError(Exception):
    """Base error for weather data access failures."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    @property
    def retryable(self) -> bool:
        """True if re-issuing the failed call may succeed."""
        return self.kind in _RETRYABLE_KINDS

    def to_dict(self) -> dict[str, Any]:
        """Convert to the consumer-facing error object."""
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.status_code is not None:
            result["status_code"] = self.status_code
        if self.details is not None:
            result["details"] = (
                str(self.details)
                if isinstance(self.details, BaseException)
                else self.details
            )
        return result


class WeatherValidationError(WeatherError):
    """Payload or input failed structural validation."""

    kind = ErrorKind.VALIDATION


class WeatherApiError(WeatherError):
    """Upstream returned a completed but failing response."""

    kind = ErrorKind.API_ERROR

    @property
    def retryable(self) -> bool:
        return is_retryable_status(self.status_code)


class WeatherNetworkError(WeatherError):
    """Transport failure, or the retry budget ran out."""

    kind = ErrorKind.NETWORK_ERROR


class WeatherTimeout(WeatherError):
    """A request exceeded its timeout."""

    kind = ErrorKind.TIMEOUT


class WeatherUnknownError(WeatherError):
    """Unclassifiable failure."""

    kind = ErrorKind.UNKNOWN


def is_retryable_status(status_code: int | None) -> bool:
    """Return True if re-issuing a request that got this status may succeed.

    An unknown status is treated as retryable. 4xx responses are final except
    429 (Too Many Requests); 5xx responses are retryable.
    """
    if not status_code:
        return True
    if 400 <= status_code < 500:
        return status_code == 429
    return status_code >= 500


def create_api_error(
    message: str, status_code: int | None = None, details: Any = None
) -> WeatherApiError:
    return WeatherApiError(message, status_code=status_code, details=details)


def create_network_error(message: str, details: Any = None) -> WeatherNetworkError:
    return WeatherNetworkError(message, details=details)


def create_validation_error(
    message: str, details: Any = None
) -> WeatherValidationError:
    return WeatherValidationError(message, details=details)


def create_timeout_error(message: str) -> WeatherTimeout:
    return WeatherTimeout(message)


def create_unknown_error(message: str, details: Any = None) -> WeatherUnknownError:
    return WeatherUnknownError(message, details=details)


def classify_error(err: BaseException) -> WeatherError:
    """Return a typed error for any raised exception.

    Typed errors pass through unchanged. Exceptions exposing an integer
    ``status`` (e.g. ``aiohttp.ClientResponseError``) become API errors;
    everything else is ``UNKNOWN``.
    """
    if isinstance(err, WeatherError):
        return err
    status = getattr(err, "status", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return create_api_error(str(err) or f"HTTP {status}", status, err)
    return create_unknown_error(str(err) or type(err).__name__, err)
