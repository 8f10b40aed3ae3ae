"""
FatSecret image recognition client.
Forwards an image to the recognition API and maps upstream failures onto proxy errors.
"""

import base64
import logging

import httpx

from food_proxy.core.errors import UpstreamError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_UPSTREAM_MESSAGE = "Failed to process image"


def build_payload(image_bytes: bytes, region: str, language: str) -> dict:
    return {
        "image_b64": base64.b64encode(image_bytes).decode("ascii"),
        "include_food_data": True,
        "region": region,
        "language": language,
    }


def extract_error_message(body) -> str:
    """Pull ``error.message`` out of an upstream error body, if it has one."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return DEFAULT_UPSTREAM_MESSAGE


async def recognize_food(
    client: httpx.AsyncClient,
    url: str,
    access_token: str,
    image_bytes: bytes,
    region: str,
    language: str,
    timeout: float = 30.0,
) -> httpx.Response:
    """
    Send a food image to FatSecret image recognition.

    Args:
        client: HTTP client
        url: Recognition endpoint
        access_token: Bearer token from the token cache
        image_bytes: Raw uploaded image
        region: Region code, e.g. "US"
        language: Language code, e.g. "en"
        timeout: Upper bound for the whole upstream call

    Returns:
        The successful upstream response

    Raises:
        UpstreamError: If FatSecret returns a non-2xx status
        UpstreamTimeoutError: If FatSecret does not answer in time
    """
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {access_token}",
    }

    try:
        response = await client.post(
            url,
            json=build_payload(image_bytes, region, language),
            headers=headers,
            timeout=timeout,
        )
    except httpx.TimeoutException as e:
        logger.error(f"FatSecret request timed out after {timeout}s: {e!r}")
        raise UpstreamTimeoutError("Image processing took too long") from e

    if response.is_success:
        logger.info("FatSecret Response OK")
        return response

    try:
        body = response.json()
    except ValueError:
        body = response.text

    logger.error(f"FatSecret API error: HTTP {response.status_code} - {body}")
    raise UpstreamError(
        extract_error_message(body),
        status_code=response.status_code,
        details=body,
    )
