"""
Food image recognition endpoint.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, Response, UploadFile

from food_proxy.clients import recognition_client
from food_proxy.core.dependencies import HTTPClient, SettingsDep, TokenCacheDep
from food_proxy.core.errors import (
    ProxyError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)
from food_proxy.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["recognition"])


@router.post(
    "/recognize-food",
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def recognize_food(
    client: HTTPClient,
    token_cache: TokenCacheDep,
    settings: SettingsDep,
    image: Optional[UploadFile] = File(default=None, description="Food image to recognise"),
    region: Optional[str] = Form(default=None),
    language: Optional[str] = Form(default=None),
):
    """
    Forward an uploaded food image to FatSecret image recognition.

    Args:
        image: Image file (multipart field "image")
        region: Region code, defaults to "US"
        language: Language code, defaults to "en"

    Returns:
        The FatSecret JSON response, unchanged
    """
    if image is None:
        raise ValidationError("Please upload an image file", error="No image file provided")

    # Bounded read: one byte past the limit is enough to reject the upload
    image_bytes = await image.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(image_bytes) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"File too large (max {settings.MAX_UPLOAD_BYTES} bytes)",
            status_code=413,
            error="File too large",
        )

    logger.info(f"Processing image: {image.filename} ({len(image_bytes)} bytes)")

    try:
        access_token = await token_cache.get_token(client)
        upstream = await recognition_client.recognize_food(
            client,
            settings.FATSECRET_RECOGNITION_URL,
            access_token,
            image_bytes,
            region=region or settings.DEFAULT_REGION,
            language=language or settings.DEFAULT_LANGUAGE,
            timeout=settings.UPSTREAM_TIMEOUT,
        )
    except (UpstreamError, UpstreamTimeoutError):
        raise
    except Exception as e:
        logger.error(f"Error processing image recognition: {e}")
        raise ProxyError(str(e) or "Unexpected error") from e

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type", "application/json"),
    )
