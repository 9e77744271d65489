"""Tests for the generic TTL cache."""

from __future__ import annotations

import pytest

from retro_weather_core.cache import (
    CacheMetadata,
    TTLCache,
    format_cache_age,
    format_cache_remaining,
)

from .conftest import FakeClock

TTL = 300_000


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache[str]:
    return TTLCache(TTL, clock=clock)


class TestGetSet:
    """TTL correctness and lazy eviction."""

    def test_get_missing(self, cache: TTLCache[str]) -> None:
        assert cache.get("nope") is None

    def test_value_served_until_expiry(
        self, cache: TTLCache[str], clock: FakeClock
    ) -> None:
        """Set at t=0 with ttl=300000: hit at 299999, miss at 300000."""
        cache.set("weather:42.3601,-71.0589", "obs")
        clock.now = 299_999
        assert cache.get("weather:42.3601,-71.0589") == "obs"
        assert cache.size() == 1

        clock.now = 300_000
        assert cache.get("weather:42.3601,-71.0589") is None
        assert cache.size() == 0

    def test_set_replaces_entry(self, cache: TTLCache[str], clock: FakeClock) -> None:
        cache.set("k", "old")
        clock.advance(200_000)
        cache.set("k", "new")
        clock.advance(200_000)
        # Expiry restarts from the second set
        assert cache.get("k") == "new"
        assert cache.size() == 1

    def test_has(self, cache: TTLCache[str], clock: FakeClock) -> None:
        cache.set("k", "v")
        assert cache.has("k") is True
        clock.advance(TTL)
        assert cache.has("k") is False
        assert "k" not in cache.keys()

    def test_rejects_non_positive_ttl(self) -> None:
        with pytest.raises(ValueError):
            TTLCache(0)


class TestInvalidation:
    """Explicit removal."""

    def test_invalidate(self, cache: TTLCache[str]) -> None:
        cache.set("a", "1")
        cache.set("b", "2")
        cache.invalidate("a")
        assert cache.get("a") is None
        assert cache.keys() == ["b"]

    def test_invalidate_is_idempotent(self, cache: TTLCache[str]) -> None:
        cache.set("b", "2")
        cache.invalidate("missing")
        cache.invalidate("a")
        cache.invalidate("a")
        assert cache.keys() == ["b"]

    def test_clear(self, cache: TTLCache[str]) -> None:
        cache.set("a", "1")
        cache.set("b", "2")
        cache.clear()
        assert cache.size() == 0
        assert len(cache) == 0


class TestMetadata:
    """get_metadata() is read-only."""

    def test_missing(self, cache: TTLCache[str]) -> None:
        assert cache.get_metadata("nope") is None

    def test_fresh_entry(self, cache: TTLCache[str], clock: FakeClock) -> None:
        clock.now = 1_000
        cache.set("k", "v")
        clock.now = 61_000
        assert cache.get_metadata("k") == CacheMetadata(
            age=60_000, remaining=240_000, is_expired=False
        )

    def test_expired_entry_not_evicted(
        self, cache: TTLCache[str], clock: FakeClock
    ) -> None:
        cache.set("k", "v")
        clock.now = TTL + 5_000
        metadata = cache.get_metadata("k")
        assert metadata is not None
        assert metadata.is_expired is True
        assert metadata.remaining == -5_000
        assert cache.size() == 1

    def test_expired_at_exact_boundary(
        self, cache: TTLCache[str], clock: FakeClock
    ) -> None:
        cache.set("k", "v")
        clock.now = TTL
        metadata = cache.get_metadata("k")
        assert metadata is not None
        assert metadata.is_expired is True


class TestCleanup:
    """Periodic sweep."""

    def test_removes_only_expired(self, cache: TTLCache[str], clock: FakeClock) -> None:
        cache.set("old1", "a")
        cache.set("old2", "b")
        clock.now = 100_000
        cache.set("fresh", "c")
        clock.now = TTL

        assert cache.cleanup() == 2
        assert cache.keys() == ["fresh"]

    def test_nothing_to_remove(self, cache: TTLCache[str]) -> None:
        cache.set("k", "v")
        assert cache.cleanup() == 0
        assert cache.size() == 1

    def test_empty_cache(self, cache: TTLCache[str]) -> None:
        assert cache.cleanup() == 0


class TestFormatting:
    """Display helpers."""

    @pytest.mark.parametrize(
        ("ms", "expected"),
        [(0, "0s ago"), (45_000, "45s ago"), (150_000, "2m 30s ago"), (60_999, "1m 0s ago")],
    )
    def test_format_cache_age(self, ms: float, expected: str) -> None:
        assert format_cache_age(ms) == expected

    @pytest.mark.parametrize(
        ("ms", "expected"),
        [(999, "0s"), (45_000, "45s"), (300_000, "5m 0s"), (150_500, "2m 30s")],
    )
    def test_format_cache_remaining(self, ms: float, expected: str) -> None:
        assert format_cache_remaining(ms) == expected
