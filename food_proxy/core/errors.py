"""
Proxy error taxonomy and the FastAPI handlers that render it.

Every error produced by the proxy is returned as ``{error, message, details?}``.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error is not None:
            self.error = error
        self.details = details

    def to_response(self) -> JSONResponse:
        content = {"error": self.error, "message": self.message}
        if self.details is not None:
            content["details"] = self.details
        return JSONResponse(status_code=self.status_code, content=content)


class ValidationError(ProxyError):
    """The caller sent an unusable request (e.g. no image)."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class UpstreamError(ProxyError):
    """FatSecret answered with a non-2xx status; the status is passed through."""

    error = "FatSecret API Error"


class UpstreamTimeoutError(ProxyError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    error = "Request Timeout"


class AuthenticationError(ProxyError):
    """
    Token fetch failed. Reported to the caller as a generic server error,
    never retried.
    """


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error-body handlers to an application."""

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError):
        return exc.to_response()

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Request validation failed for {request.method} {request.url.path}: {exc.errors()}")
        return ValidationError(
            "Invalid request parameters",
            details=jsonable_errors(exc),
        ).to_response()

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return ProxyError(
                f"Route {request.method} {request.url.path} not found",
                status_code=status.HTTP_404_NOT_FOUND,
                error="Not Found",
            ).to_response()
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return ProxyError(
                f"Method {request.method} not allowed on {request.url.path}",
                status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
                error="Method Not Allowed",
            ).to_response()
        return ProxyError(
            str(exc.detail),
            status_code=exc.status_code,
            error="HTTP Error",
        ).to_response()

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return ProxyError(str(exc) or "Unexpected error").to_response()


def jsonable_errors(exc: RequestValidationError) -> list:
    """Strip non-serialisable context (e.g. exception instances) from validation errors."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
