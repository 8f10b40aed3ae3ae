"""
FatSecret Proxy - Main FastAPI Application
Authenticates against FatSecret with a cached OAuth token and relays
image recognition requests.
"""

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from food_proxy.api import health, recognition, token
from food_proxy.clients.token_cache import TokenCache
from food_proxy.core.config import Settings, settings as default_settings
from food_proxy.core.dependencies import close_http_client
from food_proxy.core.errors import register_exception_handlers

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Runs on startup and shutdown.
    """
    settings = app.state.settings

    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} on {settings.HOST}:{settings.PORT}")
    logger.info("Health Check: GET /health")
    logger.info("Recognize Food: POST /api/recognize-food")
    logger.info("Token Status: GET /api/token-status")
    if not settings.has_credentials:
        logger.warning("FATSECRET_CLIENT_ID / FATSECRET_CLIENT_SECRET not set; token fetches will fail")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_http_client(app)
    logger.info("HTTP client closed")


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    token_cache: Optional[TokenCache] = None,
) -> FastAPI:
    """
    Build the proxy application.

    Args:
        settings: Configuration, defaults to the environment-loaded settings
        http_client: Client for upstream calls; created on first request if omitted
        token_cache: Token cache; built from settings if omitted
    """
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="OAuth-authenticated proxy for FatSecret image recognition",
        version=settings.APP_VERSION,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.http_client = http_client
    app.state.token_cache = token_cache or TokenCache.from_settings(settings)

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable) -> Response:
        """Log every request with the caller's address and the response status."""
        forwarded = request.headers.get("x-forwarded-for")
        ip = forwarded.split(",")[0].strip() if forwarded else (request.client.host if request.client else "-")
        logger.info(
            f"{request.method} {request.url.path} - IP: {ip} - "
            f"User-Agent: {request.headers.get('user-agent', '-')}"
        )
        response: Response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - Status: {response.status_code}")
        return response

    register_exception_handlers(app)

    # Include API routers
    app.include_router(health.router)
    app.include_router(recognition.router)
    app.include_router(token.router)

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with service information."""
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running",
            "endpoints": {
                "GET /health": "Service health check",
                "POST /api/recognize-food": "Food image recognition (multipart field 'image')",
                "GET /api/token-status": "Cached OAuth token status",
                "DELETE /api/token": "Clear the cached OAuth token",
            },
            "documentation": {
                "swagger": "/docs",
                "redoc": "/redoc",
                "openapi": "/openapi.json"
            }
        }

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "food_proxy.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
