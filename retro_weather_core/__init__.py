"""Resilient data access core for the retro-weather app.

Fetches National Weather Service data with retry/backoff, validates the
payloads, and maps them to stable domain models.
"""

__version__ = "0.1.0"

from .cache import CacheEntry, CacheMetadata, TTLCache, format_cache_age, format_cache_remaining
from .errors import (
    ErrorKind,
    WeatherApiError,
    WeatherError,
    WeatherNetworkError,
    WeatherTimeout,
    WeatherUnknownError,
    WeatherValidationError,
    classify_error,
    create_api_error,
    create_network_error,
    create_timeout_error,
    create_unknown_error,
    create_validation_error,
    is_retryable_status,
)
from .http import DEFAULT_RETRY, FetchResponse, RetryPolicy, compute_backoff_delay, fetch_with_retry
from .loader import LoaderResult, with_error_handling, with_graceful_fallback
from .location_loader import (
    load_current_conditions,
    load_forecast,
    load_location_weather,
    parse_coordinates,
)
from .models import (
    Coordinates,
    CurrentConditions,
    ForecastDay,
    Hazard,
    LocationInfo,
    LocationWeather,
    Observation,
    Station,
)
from .nws import NwsClient
from .weather_cache import CacheCleaner, WeatherCache, WeatherCacheData, make_coords_key

__all__ = [
    "DEFAULT_RETRY",
    "CacheCleaner",
    "CacheEntry",
    "CacheMetadata",
    "Coordinates",
    "CurrentConditions",
    "ErrorKind",
    "FetchResponse",
    "ForecastDay",
    "Hazard",
    "LoaderResult",
    "LocationInfo",
    "LocationWeather",
    "NwsClient",
    "Observation",
    "RetryPolicy",
    "Station",
    "TTLCache",
    "WeatherApiError",
    "WeatherCache",
    "WeatherCacheData",
    "WeatherError",
    "WeatherNetworkError",
    "WeatherTimeout",
    "WeatherUnknownError",
    "WeatherValidationError",
    "__version__",
    "classify_error",
    "compute_backoff_delay",
    "create_api_error",
    "create_network_error",
    "create_timeout_error",
    "create_unknown_error",
    "create_validation_error",
    "fetch_with_retry",
    "format_cache_age",
    "format_cache_remaining",
    "is_retryable_status",
    "load_current_conditions",
    "load_forecast",
    "load_location_weather",
    "make_coords_key",
    "parse_coordinates",
    "with_error_handling",
    "with_graceful_fallback",
]
