from creator_api.services.cache import CacheEntry, TTLCache

from conftest import FakeClock


def test_get_returns_value_until_ttl_elapses() -> None:
    clock = FakeClock()
    cache = TTLCache(default_ttl=20, clock=clock)
    cache.set("subscriberCount", 1000)

    clock.advance(19.9)
    assert cache.get("subscriberCount") == 1000

    clock.advance(0.1)
    assert cache.get("subscriberCount") is None


def test_missing_key_is_none() -> None:
    assert TTLCache().get("nope") is None
    assert TTLCache().get_stale("nope") is None


def test_expired_entry_is_kept_for_stale_reads() -> None:
    clock = FakeClock()
    cache = TTLCache(default_ttl=5, clock=clock)
    cache.set("k", 42)
    clock.advance(100)

    assert cache.get("k") is None
    assert cache.get_stale("k") == 42
    assert len(cache) == 1


def test_set_overwrites_and_resets_age() -> None:
    clock = FakeClock()
    cache = TTLCache(default_ttl=10, clock=clock)
    cache.set("k", 1)
    clock.advance(8)
    cache.set("k", 2)
    clock.advance(8)

    assert cache.get("k") == 2
    assert cache.entry("k") == CacheEntry(value=2, stored_at=8, ttl=10)


def test_per_entry_ttl_overrides_default() -> None:
    clock = FakeClock()
    cache = TTLCache(default_ttl=60, clock=clock)
    cache.set("short", "a", ttl=1)
    cache.set("long", "b")
    clock.advance(2)

    assert cache.get("short") is None
    assert cache.get("long") == "b"


def test_zero_is_a_real_value() -> None:
    cache = TTLCache(default_ttl=10, clock=FakeClock())
    cache.set("k", 0)
    assert cache.get("k") == 0


def test_purge_expired_respects_grace() -> None:
    clock = FakeClock()
    cache = TTLCache(default_ttl=10, clock=clock)
    cache.set("old", 1)
    clock.advance(15)
    cache.set("new", 2)

    assert cache.purge_expired(grace=10) == 0
    assert cache.purge_expired() == 1
    assert cache.get_stale("old") is None
    assert cache.get("new") == 2


def test_clear() -> None:
    cache = TTLCache()
    cache.set("a", 1)
    cache.clear()
    assert len(cache) == 0
