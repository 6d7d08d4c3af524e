"""Live YouTube subscriber count, cached and rate limited."""

import logging

from fastapi import APIRouter, Depends, Query, Response

from creator_api.config import Settings
from creator_api.dependencies import enforce_rate_limit, get_settings, get_subscriber_service
from creator_api.services.subscriber_count import SubscriberCountService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

ERROR_SENTINEL = "Error"


@router.get("/v1/stats/youtube/live-sub-count")
@router.get("/stats/live-sub-count")
async def live_sub_count(
    response: Response,
    force_refresh: bool = Query(False, alias="forceRefresh"),
    service: SubscriberCountService = Depends(get_subscriber_service),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Subscriber count from cache, or fetched upstream when stale or forced.

    When no count can be produced the body keeps its shape with the "Error"
    sentinel; the status is STATS_ERROR_STATUS (503 unless set to 200 for
    older clients).
    """
    result = await service.get_subscriber_count(force_refresh=force_refresh)

    if not result.ok:
        response.status_code = settings.stats_error_status
        logger.info("Subscriber count unavailable (forceRefresh=%s)", force_refresh)
        return {"subscriberCount": ERROR_SENTINEL}

    logger.info("Subscriber count served: %d (%s)", result.subscriber_count, result.source)
    return {"subscriberCount": result.subscriber_count}
