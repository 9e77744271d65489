"""Failure-handling strategies for composing weather calls.

``with_error_handling`` is for must-have data: the caller always gets a
``LoaderResult`` and never an exception. ``with_graceful_fallback`` is for
nice-to-have data: failures are logged as warnings and replaced by a
fallback value.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import WeatherError, classify_error, create_api_error

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _to_wire(value: Any) -> Any:
    return value.to_dict() if hasattr(value, "to_dict") else value


@dataclass
class LoaderResult(Generic[T]):
    """Result of a must-have load: ``data`` on success, ``error`` on failure."""

    data: T | None
    error: WeatherError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        data: Any = self.data
        if isinstance(data, list):
            data = [_to_wire(item) for item in data]
        else:
            data = _to_wire(data)
        result: dict[str, Any] = {"data": data}
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


async def with_error_handling(
    operation: Callable[[], Awaitable[T]], error_message: str
) -> LoaderResult[T]:
    """Run ``operation`` and wrap the outcome in a ``LoaderResult``.

    Typed errors are passed through unchanged; any other exception becomes
    an API error carrying the original exception as ``details``.
    """
    try:
        data = await operation()
    except Exception as err:
        _LOGGER.error("%s: %s", error_message, err)
        if isinstance(err, WeatherError):
            return LoaderResult(data=None, error=err)
        status = getattr(err, "status", None)
        if not isinstance(status, int) or isinstance(status, bool):
            status = None
        return LoaderResult(data=None, error=create_api_error(error_message, status, err))
    return LoaderResult(data=data)


async def with_graceful_fallback(
    operation: Callable[[], Awaitable[T]], fallback: T, warning_message: str
) -> T:
    """Run ``operation``, returning ``fallback`` if it raises."""
    try:
        return await operation()
    except Exception as err:
        typed = classify_error(err)
        _LOGGER.warning("%s (%s): %s", warning_message, typed.kind.value, err)
        return fallback
