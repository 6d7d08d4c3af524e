import pytest

from creator_api.services.rate_limit import FixedWindowRateLimiter

from conftest import FakeClock


def test_request_over_limit_rejected_until_next_window() -> None:
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=3, window_seconds=60, clock=clock)

    assert [limiter.allow("1.2.3.4") for _ in range(3)] == [True, True, True]
    assert limiter.allow("1.2.3.4") is False

    clock.advance(60)
    assert limiter.allow("1.2.3.4") is True


def test_window_is_anchored_on_first_request() -> None:
    clock = FakeClock(start=100)
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=clock)

    assert limiter.allow("c") is True
    clock.advance(30)
    assert limiter.allow("c") is False
    clock.advance(29.9)
    assert limiter.allow("c") is False
    clock.advance(0.1)
    assert limiter.allow("c") is True


def test_clients_are_counted_separately() -> None:
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=FakeClock())

    assert limiter.allow("a") is True
    assert limiter.allow("b") is True
    assert limiter.allow("a") is False


def test_hit_reports_remaining_and_reset() -> None:
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=2, window_seconds=60, clock=clock)

    first = limiter.hit("c")
    assert first.allowed and first.remaining == 1 and first.reset_after == 60

    clock.advance(15)
    second = limiter.hit("c")
    assert second.allowed and second.remaining == 0 and second.reset_after == 45

    third = limiter.hit("c")
    assert not third.allowed
    assert third.remaining == 0
    assert third.limit == 2


def test_expired_windows_pruned_when_table_full() -> None:
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=10, clock=clock, max_clients=2)
    limiter.allow("a")
    limiter.allow("b")
    clock.advance(10)

    assert limiter.allow("c") is True
    assert set(limiter._windows) == {"c"}


def test_full_table_of_live_windows_not_rescanned_per_new_client() -> None:
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=10, clock=clock, max_clients=2)
    limiter.allow("a")
    limiter.allow("b")

    clock.now = 1
    limiter.allow("c")
    assert limiter._next_prune_at == 10

    clock.now = 2
    limiter.allow("d")
    assert set(limiter._windows) == {"a", "b", "c", "d"}

    clock.now = 10
    limiter.allow("e")
    assert set(limiter._windows) == {"c", "d", "e"}


@pytest.mark.parametrize("limit, window", [(0, 60), (5, 0)])
def test_invalid_configuration_rejected(limit: int, window: float) -> None:
    with pytest.raises(ValueError):
        FixedWindowRateLimiter(limit=limit, window_seconds=window)
