"""Constants for the weather data access core."""

from __future__ import annotations

from typing import Final

NWS_BASE_URL: Final = "https://api.weather.gov"

# NWS asks every client to identify itself with a descriptive User-Agent.
USER_AGENT: Final = "retro-weather/0.1 (+https://github.com/danlourenco/retro-weather)"

GEO_JSON: Final = "application/geo+json"

# Retry defaults (see http.RetryPolicy)
DEFAULT_MAX_RETRIES: Final = 2
DEFAULT_BASE_DELAY_MS: Final = 500
DEFAULT_MAX_DELAY_MS: Final = 4000
DEFAULT_TIMEOUT_MS: Final = 15000

# Observations are cached for 5 minutes
WEATHER_CACHE_TTL_MS: Final = 5 * 60 * 1000
CACHE_CLEANUP_INTERVAL_S: Final = 60.0

# Coordinates are rounded to this many decimals in URLs and cache keys
COORD_PRECISION: Final = 4
