"""Fixed-window request limiter keyed by client identity.

A client's window opens on its first request and lasts ``window_seconds``.
Within a window the first ``limit`` requests pass; the rest are rejected
until the window elapses, at which point the next request opens a new one.
State is per-process, like the cache.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class RateWindow:
    window_start: float
    count: int = 0


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_after: float


class FixedWindowRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_clients: int = 10_000,
    ):
        if limit < 1:
            raise ValueError(f"Rate limit must be at least 1, got {limit}")
        if window_seconds <= 0:
            raise ValueError(f"Rate limit window must be positive, got {window_seconds}")
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_clients = max_clients
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}
        self._next_prune_at = float("-inf")
        self._lock = threading.Lock()

    def hit(self, client_id: str) -> RateLimitResult:
        """Count one request from *client_id* and report whether it may proceed."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(client_id)
            if window is None or now - window.window_start >= self.window_seconds:
                if (
                    window is None
                    and len(self._windows) >= self.max_clients
                    and now >= self._next_prune_at
                ):
                    self._prune(now)
                window = RateWindow(window_start=now)
                self._windows[client_id] = window
            window.count += 1
            count = window.count
            reset_after = self.window_seconds - (now - window.window_start)

        return RateLimitResult(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_after=reset_after,
        )

    def allow(self, client_id: str) -> bool:
        return self.hit(client_id).allowed

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._next_prune_at = float("-inf")

    def _prune(self, now: float) -> None:
        # Caller holds the lock.
        expired = [
            cid for cid, w in self._windows.items() if now - w.window_start >= self.window_seconds
        ]
        for cid in expired:
            del self._windows[cid]
        # Nothing else can expire before the oldest surviving window does.
        oldest = min((w.window_start for w in self._windows.values()), default=now)
        self._next_prune_at = oldest + self.window_seconds
