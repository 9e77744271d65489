"""Tests for the coordinate-keyed weather cache and its cleaner."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from retro_weather_core.const import WEATHER_CACHE_TTL_MS
from retro_weather_core.models import Observation, Station
from retro_weather_core.weather_cache import (
    CacheCleaner,
    WeatherCache,
    WeatherCacheData,
    make_coords_key,
)

from .conftest import FakeClock

DATA = WeatherCacheData(
    observation=Observation(temperature_c=15.5, text_description="Partly Cloudy"),
    station=Station(id="KBOS", name="Boston"),
)


@pytest.fixture
def weather_cache(clock: FakeClock) -> WeatherCache:
    return WeatherCache(clock=clock)


class TestKeys:
    def test_normalised_coordinates(self) -> None:
        assert make_coords_key(42.36012, -71.05891) == "weather:42.3601,-71.0589"

    def test_equivalent_coordinates_share_key(self) -> None:
        assert make_coords_key(42.36, -71.0) == make_coords_key(42.360001, -71.00004)


class TestWeatherCache:
    def test_default_ttl_is_five_minutes(self) -> None:
        assert WeatherCache().store.ttl_ms == WEATHER_CACHE_TTL_MS == 300_000

    def test_round_trip_and_expiry(
        self, weather_cache: WeatherCache, clock: FakeClock, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG):
            assert weather_cache.get(42.3601, -71.0589) is None
            weather_cache.set(42.3601, -71.0589, DATA)
            clock.advance(150_000)
            assert weather_cache.get(42.36012, -71.05891) is DATA
            assert weather_cache.has(42.3601, -71.0589)

        assert "Cache MISS for weather:42.3601,-71.0589" in caplog.text
        assert "Cache SET for weather:42.3601,-71.0589 (TTL 5m 0s)" in caplog.text
        assert "age 2m 30s ago, remaining 2m 30s" in caplog.text

        clock.advance(150_000)
        assert weather_cache.get(42.3601, -71.0589) is None
        assert weather_cache.store.size() == 0

    def test_metadata(self, weather_cache: WeatherCache, clock: FakeClock) -> None:
        weather_cache.set(1, 2, DATA)
        clock.advance(1_000)
        metadata = weather_cache.get_metadata(1, 2)
        assert metadata is not None
        assert metadata.age == 1_000
        assert weather_cache.get_metadata(3, 4) is None

    def test_invalidate_and_clear(self, weather_cache: WeatherCache) -> None:
        weather_cache.set(1, 2, DATA)
        weather_cache.set(3, 4, DATA)
        weather_cache.invalidate(1, 2)
        weather_cache.invalidate(1, 2)
        assert not weather_cache.has(1, 2)
        assert weather_cache.has(3, 4)
        weather_cache.clear()
        assert weather_cache.store.size() == 0

    def test_cleanup(
        self, weather_cache: WeatherCache, clock: FakeClock, caplog: pytest.LogCaptureFixture
    ) -> None:
        weather_cache.set(1, 2, DATA)
        weather_cache.set(3, 4, DATA)
        clock.advance(WEATHER_CACHE_TTL_MS)
        weather_cache.set(5, 6, DATA)

        with caplog.at_level(logging.INFO):
            assert weather_cache.cleanup() == 2

        assert "removed 2 expired entries" in caplog.text
        assert weather_cache.store.keys() == [make_coords_key(5, 6)]


class TestCacheCleaner:
    """Periodic sweep independent of request traffic."""

    async def test_runs_periodically(self) -> None:
        cleanup = MagicMock(return_value=0)
        cleaner = CacheCleaner(cleanup, interval=0.01)

        cleaner.start()
        assert cleaner.running
        await asyncio.sleep(0.05)
        await cleaner.stop()

        assert cleanup.call_count >= 2
        assert not cleaner.running

    async def test_start_is_idempotent(self) -> None:
        cleaner = CacheCleaner(MagicMock(return_value=0), interval=10)
        cleaner.start()
        task = cleaner._task
        cleaner.start()
        assert cleaner._task is task
        await cleaner.stop()

    async def test_stop_without_start(self) -> None:
        await CacheCleaner(MagicMock(return_value=0)).stop()

    async def test_failing_sweep_keeps_running(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        calls = 0

        def cleanup() -> int:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("sweep failed")
            return 0

        cleaner = CacheCleaner(cleanup, interval=0.01)
        cleaner.start()
        await asyncio.sleep(0.05)
        await cleaner.stop()

        assert calls >= 2
        assert "Cache cleanup failed" in caplog.text

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            CacheCleaner(MagicMock(), interval=0)
