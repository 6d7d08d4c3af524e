"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Depends

from creator_api.config import Settings
from creator_api.dependencies import get_settings, get_subscriber_service
from creator_api.services.subscriber_count import SubscriberCountService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(settings: Settings = Depends(get_settings)) -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": "creator-api", "commit": settings.git_sha}


@router.get("/health")
async def health(
    settings: Settings = Depends(get_settings),
    service: SubscriberCountService = Depends(get_subscriber_service),
) -> dict:
    """Report cache and collaborator state without calling YouTube."""
    missing = settings.validate()
    return {
        "status": "ok" if not missing else "degraded",
        "service": "creator-api",
        "commit": settings.git_sha,
        "subscriber_count_cache": service.cache_state(),
        "storage_backend": settings.storage_backend,
        "missing_config": missing,
    }
