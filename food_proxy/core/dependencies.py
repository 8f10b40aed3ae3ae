"""
Shared dependencies for FastAPI endpoints.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
import httpx

from food_proxy.clients.token_cache import TokenCache
from food_proxy.core.config import Settings

logger = logging.getLogger(__name__)


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get or create the application's HTTP client.
    Used for calls to the FatSecret OAuth and recognition servers.
    """
    state = request.app.state
    if state.http_client is None:
        state.http_client = httpx.AsyncClient(
            timeout=state.settings.UPSTREAM_TIMEOUT,
            follow_redirects=True,
        )
    return state.http_client


async def close_http_client(app) -> None:
    """Close the application's HTTP client."""
    if app.state.http_client is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None


def get_token_cache(request: Request) -> TokenCache:
    return request.app.state.token_cache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# Dependency annotations
HTTPClient = Annotated[httpx.AsyncClient, Depends(get_http_client)]
TokenCacheDep = Annotated[TokenCache, Depends(get_token_cache)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
