"""Simple in-memory TTL cache. No Redis needed.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
the subscriber count may be fetched twice per TTL window (once per worker).
This is acceptable at this scale.

Expired entries are not removed on read: ``get`` treats them as absent while
``get_stale`` still returns them, so a failed refresh can fall back to the
last known value. ``purge_expired`` is available for memory hygiene when the
key set grows.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    stored_at: float
    ttl: float

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_expired(self, now: float) -> bool:
        return self.age(now) >= self.ttl


class TTLCache:
    """Thread-safe read-through cache store with per-entry TTL.

    Usage::

        cache = TTLCache(default_ttl=20)
        cache.set("subscriberCount", 1000)
        hit = cache.get("subscriberCount")  # value, or None once expired
    """

    def __init__(self, default_ttl: float = 60, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def get(self, key: str) -> Any | None:
        """Return the cached value if present and not expired, else None."""
        with self._lock:
            entry = self._store.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return entry.value

    def get_stale(self, key: str) -> Any | None:
        """Return the last stored value even if expired, or None if never set."""
        with self._lock:
            entry = self._store.get(key)
        return entry.value if entry is not None else None

    def entry(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Insert or overwrite *key*, resetting its age to zero."""
        entry = CacheEntry(
            value=value,
            stored_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )
        # Entries are immutable; swapping the reference is the whole write.
        with self._lock:
            self._store[key] = entry

    def purge_expired(self, grace: float = 0.0) -> int:
        """Drop entries older than ``ttl + grace``. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._store.items() if e.age(now) >= e.ttl + grace]
            for key in expired:
                del self._store[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
