"""Read-through subscriber count service.

Decides between the cached count and a fresh upstream fetch:

- fresh cache, no force  → cached value, zero upstream calls
- stale/empty, or forced → one fetch; success replaces the cache entry
- fetch failed           → last known value if one was ever cached,
                           otherwise no value (the HTTP layer renders "Error")

FetchError never escapes this module.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from creator_api.services.cache import TTLCache
from creator_api.services.youtube import FetchError

logger = logging.getLogger(__name__)

CACHE_KEY = "subscriberCount"


class SubscriberFetcher(Protocol):
    async def fetch(self) -> int: ...


@dataclass(frozen=True)
class CountResult:
    subscriber_count: int | None
    source: str  # "cache", "upstream", "stale" or "error"

    @property
    def ok(self) -> bool:
        return self.subscriber_count is not None


class SubscriberCountService:
    def __init__(self, fetcher: SubscriberFetcher, cache: TTLCache, ttl_seconds: float):
        self.fetcher = fetcher
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    async def get_subscriber_count(self, force_refresh: bool = False) -> CountResult:
        if not force_refresh:
            cached = self.cache.get(CACHE_KEY)
            if cached is not None:
                logger.debug("Using cached subscriber count")
                return CountResult(cached, "cache")

        try:
            count = await self.fetcher.fetch()
        except FetchError as e:
            return self._fallback(e)

        self.cache.set(CACHE_KEY, count, ttl=self.ttl_seconds)
        return CountResult(count, "upstream")

    def _fallback(self, error: FetchError) -> CountResult:
        last_known = self.cache.get_stale(CACHE_KEY)
        if last_known is not None:
            logger.warning("Subscriber count fetch failed, serving last known value: %s", error)
            return CountResult(last_known, "stale")
        logger.error("Subscriber count fetch failed with nothing cached: %s", error)
        return CountResult(None, "error")

    def cache_state(self) -> dict:
        """Describe the cached count for health reporting: empty, fresh or stale."""
        entry = self.cache.entry(CACHE_KEY)
        if entry is None:
            return {"state": "empty", "age_seconds": None, "ttl_seconds": self.ttl_seconds}
        now = self.cache.now()
        return {
            "state": "stale" if entry.is_expired(now) else "fresh",
            "age_seconds": round(entry.age(now), 1),
            "ttl_seconds": entry.ttl,
        }
