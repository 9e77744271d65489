"""Cache of current conditions per location.

Observations are cached for five minutes keyed by normalised coordinates,
and a background ``CacheCleaner`` sweeps expired entries on a fixed interval.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .cache import (
    CacheMetadata,
    TTLCache,
    format_cache_age,
    format_cache_remaining,
    now_ms,
)
from .const import CACHE_CLEANUP_INTERVAL_S, WEATHER_CACHE_TTL_MS
from .models import Observation, Station
from .nws import format_point

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherCacheData:
    observation: Observation | None
    station: Station | None


def make_coords_key(lat: float, lon: float) -> str:
    """Build a cache key from a coordinate pair, e.g. ``weather:42.3601,-71.0589``."""
    return f"weather:{format_point(lat, lon)}"


class WeatherCache:
    """Current-conditions cache keyed by coordinates."""

    def __init__(
        self,
        ttl_ms: float = WEATHER_CACHE_TTL_MS,
        *,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._cache: TTLCache[WeatherCacheData] = TTLCache(ttl_ms, clock=clock)

    @property
    def store(self) -> TTLCache[WeatherCacheData]:
        return self._cache

    def get(self, lat: float, lon: float) -> WeatherCacheData | None:
        key = make_coords_key(lat, lon)
        data = self._cache.get(key)
        if data is None:
            _LOGGER.debug("Cache MISS for %s", key)
            return None
        metadata = self._cache.get_metadata(key)
        if metadata is not None:
            _LOGGER.debug(
                "Cache HIT for %s (age %s, remaining %s)",
                key,
                format_cache_age(metadata.age),
                format_cache_remaining(metadata.remaining),
            )
        return data

    def set(self, lat: float, lon: float, data: WeatherCacheData) -> None:
        key = make_coords_key(lat, lon)
        self._cache.set(key, data)
        _LOGGER.info(
            "Cache SET for %s (TTL %s)", key, format_cache_remaining(self._cache.ttl_ms)
        )

    def has(self, lat: float, lon: float) -> bool:
        return self._cache.has(make_coords_key(lat, lon))

    def invalidate(self, lat: float, lon: float) -> None:
        key = make_coords_key(lat, lon)
        self._cache.invalidate(key)
        _LOGGER.info("Cache INVALIDATED for %s", key)

    def clear(self) -> None:
        self._cache.clear()
        _LOGGER.info("Cache CLEARED (all entries removed)")

    def get_metadata(self, lat: float, lon: float) -> CacheMetadata | None:
        return self._cache.get_metadata(make_coords_key(lat, lon))

    def cleanup(self) -> int:
        removed = self._cache.cleanup()
        if removed > 0:
            _LOGGER.info("Cache cleanup: removed %d expired entries", removed)
        return removed


class CacheCleaner:
    """Run ``cleanup()`` on a cache at a fixed interval.

    Usage:
        cleaner = CacheCleaner(weather_cache.cleanup, interval=60)
        cleaner.start()
        ...
        await cleaner.stop()
    """

    def __init__(
        self,
        cleanup: Callable[[], int],
        *,
        interval: float = CACHE_CLEANUP_INTERVAL_S,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._cleanup = cleanup
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval)
                try:
                    self._cleanup()
                except Exception as err:
                    _LOGGER.exception("Cache cleanup failed: %s", err)
        except asyncio.CancelledError:
            _LOGGER.debug("Cache cleaner cancelled")
            raise
