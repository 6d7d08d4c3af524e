"""Shared test fixtures and dummy classes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from creator_api.app import create_app
from creator_api.config import Settings
from creator_api.services.cache import TTLCache
from creator_api.services.rate_limit import FixedWindowRateLimiter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """Subscriber fetcher returning (or raising) queued results.

    The last result repeats once the queue is down to one item.
    """

    def __init__(self, *results: int | Exception) -> None:
        self.results = list(results)
        self.calls = 0

    async def fetch(self) -> int:
        self.calls += 1
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


class FakeRecordStore:
    """In-memory record store."""

    def __init__(self, error: Exception | None = None) -> None:
        self.rows: list[dict] = []
        self.error = error

    async def insert(self, record: dict) -> dict:
        if self.error is not None:
            raise self.error
        row = {"id": len(self.rows) + 1, **record, "created_at": "2026-01-01T00:00:00"}
        self.rows.append(row)
        return row


def make_settings(**overrides) -> Settings:
    settings = Settings()
    settings.youtube_api_key = "test-key"
    settings.static_dir = ""
    settings.database_url = None
    settings.storage_backend = "local"
    settings.stats_error_status = 503
    settings.trust_proxy_headers = False
    settings.trusted_proxy_hops = 1
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def build_client(clock, tmp_path):
    """Factory for a TestClient around a freshly built app."""

    def _build(
        fetcher: FakeFetcher | None = None,
        *,
        ttl: float = 20,
        limit: int = 100,
        window: float = 60,
        record_store=None,
        **setting_overrides,
    ) -> TestClient:
        settings = make_settings(
            cache_ttl_seconds=ttl,
            upload_dir=str(tmp_path / "uploads"),
            **setting_overrides,
        )
        app = create_app(
            settings,
            fetcher=fetcher or FakeFetcher(1000),
            cache=TTLCache(default_ttl=ttl, clock=clock),
            rate_limiter=FixedWindowRateLimiter(limit=limit, window_seconds=window, clock=clock),
            record_store=record_store,
        )
        return TestClient(app)

    return _build
