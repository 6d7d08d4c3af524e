"""FastAPI dependencies resolving the app-owned services from ``app.state``."""

from fastapi import Request, Response

from creator_api.config import Settings
from creator_api.errors import RateLimitExceededError, ServiceNotConfiguredError
from creator_api.services.blob_store import BlobStore
from creator_api.services.rate_limit import FixedWindowRateLimiter
from creator_api.services.record_store import SqlRecordStore
from creator_api.services.subscriber_count import SubscriberCountService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_subscriber_service(request: Request) -> SubscriberCountService:
    return request.app.state.subscriber_counts


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_record_store(request: Request) -> SqlRecordStore:
    record_store = request.app.state.record_store
    if record_store is None:
        raise ServiceNotConfiguredError("Fan submissions", "DATABASE_URL")
    return record_store


def client_id(request: Request) -> str:
    """Identify the caller: peer address, or the X-Forwarded-For hop our proxy wrote.

    Proxies append to X-Forwarded-For, so entries left of the ones our own
    TRUSTED_PROXY_HOPS proxies added are client-supplied and ignored.
    """
    settings = request.app.state.settings
    if settings.trust_proxy_headers:
        hops = [h.strip() for h in request.headers.get("x-forwarded-for", "").split(",") if h.strip()]
        if len(hops) >= settings.trusted_proxy_hops:
            return hops[-settings.trusted_proxy_hops]
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(request: Request, response: Response) -> None:
    """Reject the request with 429 once the caller's window is exhausted."""
    limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
    result = limiter.hit(client_id(request))
    if not result.allowed:
        raise RateLimitExceededError(result.reset_after)
    response.headers["X-RateLimit-Limit"] = str(result.limit)
    response.headers["X-RateLimit-Remaining"] = str(result.remaining)
