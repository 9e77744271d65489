"""In-memory TTL cache with lazy eviction.

All operations are synchronous, so under asyncio no two cache operations can
interleave and no locking is needed.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


def now_ms() -> float:
    return time.time() * 1000


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A stored value. Replaced wholesale on ``set``, never mutated."""

    data: T
    timestamp: float
    expires_at: float


@dataclass(frozen=True, slots=True)
class CacheMetadata:
    """Derived view of an entry's age, in milliseconds."""

    age: float
    remaining: float
    is_expired: bool


class TTLCache(Generic[T]):
    """Expiring key/value store.

    Usage:
        cache: TTLCache[Observation] = TTLCache(ttl_ms=300_000)
        cache.set("weather:42.3601,-71.0589", observation)
        cache.get("weather:42.3601,-71.0589")
        removed = cache.cleanup()
    """

    def __init__(
        self, ttl_ms: float, *, clock: Callable[[], float] = now_ms
    ) -> None:
        """Initialize cache.

        Args:
            ttl_ms: Time to live for every entry (milliseconds)
            clock: Returns the current time in milliseconds
        """
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be > 0")
        self._ttl_ms = ttl_ms
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    @property
    def ttl_ms(self) -> float:
        return self._ttl_ms

    def get(self, key: str) -> T | None:
        """Return the stored value, or None if missing or expired.

        An expired entry is evicted as a side effect.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.data

    def set(self, key: str, data: T) -> None:
        now = self._clock()
        self._entries[key] = CacheEntry(
            data=data, timestamp=now, expires_at=now + self._ttl_ms
        )

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def get_metadata(self, key: str) -> CacheMetadata | None:
        """Describe an entry without evicting it, even if expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        now = self._clock()
        remaining = entry.expires_at - now
        return CacheMetadata(
            age=now - entry.timestamp,
            remaining=remaining,
            is_expired=remaining <= 0,
        )

    def cleanup(self) -> int:
        """Remove every expired entry and return how many were removed."""
        now = self._clock()
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def keys(self) -> list[str]:
        return list(self._entries)

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def format_cache_age(age_ms: float) -> str:
    """Format an entry age for display, e.g. ``"2m 30s ago"``."""
    return f"{format_cache_remaining(age_ms)} ago"


def format_cache_remaining(remaining_ms: float) -> str:
    """Format remaining time for display, e.g. ``"2m 30s"``."""
    seconds = int(remaining_ms // 1000)
    minutes = seconds // 60
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"
