"""
Token cache inspection endpoints.
"""

import logging

from fastapi import APIRouter

from food_proxy.core.dependencies import HTTPClient, TokenCacheDep
from food_proxy.core.errors import ProxyError
from food_proxy.schemas.common import ErrorResponse
from food_proxy.schemas.proxy import TokenStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["token"])


@router.get(
    "/token-status",
    response_model=TokenStatusResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_token_status(client: HTTPClient, token_cache: TokenCacheDep):
    """
    Report whether a token is cached and how long it remains valid.

    Goes through the cache getter, so this fetches a token if none is cached.
    """
    try:
        await token_cache.get_token(client)
    except Exception as e:
        logger.error(f"Failed to check token status: {e}")
        raise ProxyError(str(e), error="Failed to check token status") from e

    return token_cache.status()


@router.delete("/token", response_model=TokenStatusResponse)
async def clear_token(token_cache: TokenCacheDep):
    """Invalidate the cached token; the next request fetches a fresh one."""
    token_cache.clear_token()
    return token_cache.status()
