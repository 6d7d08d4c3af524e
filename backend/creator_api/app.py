"""FastAPI application entry point for the creator API."""

import logging
import os
import sys

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from creator_api.config import Settings, settings as env_settings
from creator_api.errors import register_error_handlers
from creator_api.services.blob_store import BlobStore, build_blob_store
from creator_api.services.cache import TTLCache
from creator_api.services.rate_limit import FixedWindowRateLimiter
from creator_api.services.record_store import SqlRecordStore
from creator_api.services.subscriber_count import SubscriberCountService, SubscriberFetcher
from creator_api.services.youtube import YouTubeSubscriberFetcher

# Structured logging: JSON for production, human-readable for local
if env_settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# Every upstream request would otherwise log at INFO (with the API key in the URL).
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    fetcher: SubscriberFetcher | None = None,
    cache: TTLCache | None = None,
    rate_limiter: FixedWindowRateLimiter | None = None,
    blob_store: BlobStore | None = None,
    record_store: SqlRecordStore | None = None,
) -> FastAPI:
    """Build the app and the services it owns for its lifetime.

    Collaborators default to ones built from *settings*; tests pass their own.
    """
    settings = settings or env_settings
    app = FastAPI(title="Creator API", version="1.0.0")

    if fetcher is None:
        fetcher = YouTubeSubscriberFetcher(
            api_key=settings.youtube_api_key,
            channel_id=settings.youtube_channel_id,
            api_url=settings.youtube_api_url,
            timeout=settings.upstream_timeout_seconds,
        )
    if cache is None:
        cache = TTLCache(default_ttl=settings.cache_ttl_seconds)
    if record_store is None and settings.database_url:
        record_store = SqlRecordStore(settings.database_url)

    app.state.settings = settings
    app.state.subscriber_counts = SubscriberCountService(fetcher, cache, settings.cache_ttl_seconds)
    app.state.rate_limiter = rate_limiter or FixedWindowRateLimiter(
        limit=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.state.blob_store = blob_store or build_blob_store(settings)
    app.state.record_store = record_store

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from creator_api.routes.health import router as health_router
    from creator_api.routes.stats import router as stats_router
    from creator_api.routes.submissions import router as submissions_router

    app.include_router(health_router)
    app.include_router(stats_router)
    app.include_router(submissions_router)

    # Optional static site, mounted last so API routes take precedence
    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir), name="static")

    @app.on_event("startup")
    async def _startup() -> None:
        missing = settings.validate()
        if missing:
            logger.warning("Missing env vars (some features will fail): %s", ", ".join(missing))
        if app.state.record_store is not None and settings.database_auto_create:
            await app.state.record_store.create_schema()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        if app.state.record_store is not None:
            await app.state.record_store.dispose()

    return app


app = create_app()
