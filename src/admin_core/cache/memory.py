"""Bounded in-memory TTL cache for query results."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from admin_core.config.schema import CacheConfig
from admin_core.logging.setup import get_logger

log = get_logger("cache")

T = TypeVar("T")


class HitMissRecorder(Protocol):
    """Anything that wants to hear about cache hits and misses."""

    def record_cache_hit(self) -> None: ...

    def record_cache_miss(self) -> None: ...


class MemoryCache(Generic[T]):
    """dict + monotonic clock TTL cache, bounded by entry count.

    Entries expire ``ttl_seconds`` after insertion. Expired entries are
    dropped lazily on ``get`` and swept on every ``set``. When full, ``set``
    evicts the oldest inserted entry. No operation raises.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        recorder: HitMissRecorder | None = None,
    ) -> None:
        self.config = (config or CacheConfig()).model_copy(deep=True)
        self._clock = clock
        self._recorder = recorder
        self._store: dict[str, tuple[float, T]] = {}
        self._lock = threading.RLock()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def _is_expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.config.ttl_seconds

    def get(self, key: str) -> T | None:
        """Return the stored value, or ``None`` if disabled, missing or expired."""
        if not self.config.enabled:
            return None
        with self._lock:
            entry = self._store.get(key)
            if entry is not None and self._is_expired(entry[0], self._clock()):
                del self._store[key]
                entry = None
        if entry is None:
            if self._recorder is not None:
                self._recorder.record_cache_miss()
            return None
        if self._recorder is not None:
            self._recorder.record_cache_hit()
        return entry[1]

    def set(self, key: str, value: T) -> None:
        """Store *value* under *key*, sweeping expired entries and evicting if full."""
        if not self.config.enabled:
            return
        with self._lock:
            now = self._clock()
            self._sweep(now)
            if self._store and len(self._store) >= self.config.max_size:
                oldest = next(iter(self._store))
                del self._store[oldest]
                log.debug("cache_evicted", key=oldest, size=len(self._store))
            self._store[key] = (now, value)

    def delete(self, key: str) -> bool:
        """Remove *key*; True if it was present."""
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._store.clear()

    def get_stats(self) -> dict[str, int | bool]:
        """Entry count (may include unswept stale entries) and enabled flag."""
        return {"size": len(self._store), "enabled": self.config.enabled}

    def _sweep(self, now: float) -> None:
        expired = [k for k, (ts, _) in self._store.items() if self._is_expired(ts, now)]
        for key in expired:
            del self._store[key]
        if expired:
            log.debug("cache_swept", expired=len(expired))

    def __len__(self) -> int:
        return len(self._store)


def make_key(prefix: str, *parts: object) -> str:
    """Build a namespaced cache key, e.g. ``make_key("record", "members", 42)``.

    Empty parts are skipped.
    """
    return ":".join([prefix, *(str(p) for p in parts if p not in (None, ""))])


def read_through(
    cache: MemoryCache[T],
    key: str,
    loader: Callable[[], T],
    *,
    operation: str = "query",
) -> T:
    """Return the cached value for *key*, loading and storing it on a miss.

    The loaded value is only stored when the cache config allows caching
    *operation* results and the value is not ``None``. Exceptions from
    *loader* propagate.
    """
    cached = cache.get(key)
    if cached is not None:
        return cached
    value = loader()
    if value is not None and cache.config.allows(operation):
        cache.set(key, value)
    return value
