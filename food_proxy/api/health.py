"""
Health check endpoints.
"""

import logging
import time

from fastapi import APIRouter

from food_proxy.utils.timestamps import isoformat
from food_proxy.core.dependencies import SettingsDep
from food_proxy.schemas.proxy import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def get_health_status(settings: SettingsDep):
    """
    Basic health check endpoint.

    Always reports "ok"; it does not touch FatSecret.
    """
    return HealthResponse(
        status="ok",
        timestamp=isoformat(time.time()),
        service=settings.APP_NAME,
    )
