"""Bounded TTL cache for barcode lookups."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from food_catalog.domain.foods import FoodRecord

DEFAULT_MAX_ENTRIES = 10_000
MIN_EVICTION_BATCH = 100


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _CacheEntry:
    # None marks a barcode confirmed absent from the bulk dataset.
    record: FoodRecord | None
    expires_at: datetime


class BarcodeCache:
    """In-memory barcode cache with negative caching.

    Hits and misses are both cached, misses with a shorter TTL so products
    added to the bulk dataset later show up quickly. Capacity is enforced by
    dropping an arbitrary batch of entries on write; there is no recency
    tracking.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: int = 86400,
        negative_ttl_seconds: int = 1800,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_entries <= 0:
            max_entries = DEFAULT_MAX_ENTRIES
        self.max_entries = max_entries
        self.ttl = timedelta(seconds=ttl_seconds)
        self.negative_ttl = timedelta(seconds=negative_ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, _CacheEntry] = {}

    def get(self, code: str) -> tuple[FoodRecord | None, bool]:
        """Return ``(record, found)``; ``(None, True)`` is a cached miss."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(code)
            if entry is None:
                return None, False
            if now >= entry.expires_at:
                del self._entries[code]
                return None, False
            return entry.record, True

    def set(self, code: str, record: FoodRecord) -> None:
        """Cache a resolved record with the positive TTL."""
        self._store(code, record, self.ttl)

    def set_not_found(self, code: str) -> None:
        """Cache a confirmed miss with the negative TTL."""
        self._store(code, None, self.negative_ttl)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _store(self, code: str, record: FoodRecord | None, ttl: timedelta) -> None:
        expires_at = self._clock() + ttl
        with self._lock:
            self._evict_if_full()
            self._entries[code] = _CacheEntry(record=record, expires_at=expires_at)

    def _evict_if_full(self) -> None:
        # Caller holds the lock.
        if len(self._entries) < self.max_entries:
            return
        batch = max(self.max_entries // 10, MIN_EVICTION_BATCH)
        for code in list(self._entries)[:batch]:
            del self._entries[code]
