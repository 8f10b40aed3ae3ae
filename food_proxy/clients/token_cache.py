"""
OAuth 2.0 token cache for the FatSecret API.
Fetches a client-credentials token, caches it and lazily renews it once expired.
"""

import logging
import time
from typing import Callable, Optional

import httpx

from food_proxy.core.config import Settings
from food_proxy.core.errors import AuthenticationError
from food_proxy.schemas.proxy import TokenStatusResponse
from food_proxy.utils.timestamps import isoformat

logger = logging.getLogger(__name__)


class TokenCache:
    """
    Owns the cached bearer token and its expiry.

    One instance lives on the application state and is injected into handlers.
    There is no lock around refresh: concurrent callers that find the token
    expired may each fetch, and the last assignment wins.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str,
        scope: Optional[str] = None,
        expiry_margin: int = 60,
        default_lifetime: int = 86400,
        clock: Callable[[], float] = time.time,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.scope = scope
        self.expiry_margin = expiry_margin
        self.default_lifetime = default_lifetime
        self._clock = clock

        self.access_token: Optional[str] = None
        self.token_expiry: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], float] = time.time) -> "TokenCache":
        return cls(
            client_id=settings.FATSECRET_CLIENT_ID,
            client_secret=settings.FATSECRET_CLIENT_SECRET,
            token_url=settings.FATSECRET_TOKEN_URL,
            scope=settings.FATSECRET_TOKEN_SCOPE,
            expiry_margin=settings.TOKEN_EXPIRY_MARGIN,
            default_lifetime=settings.DEFAULT_TOKEN_LIFETIME,
            clock=clock,
        )

    def is_valid(self) -> bool:
        return (
            self.access_token is not None
            and self.token_expiry is not None
            and self._clock() < self.token_expiry
        )

    async def get_token(self, client: httpx.AsyncClient) -> str:
        """
        Return a valid access token, fetching a new one if none is cached
        or the cached one has expired.

        Raises:
            AuthenticationError: If a fetch was needed and failed
        """
        if self.is_valid():
            logger.debug("Using cached access token")
            return self.access_token

        logger.info("Fetching new access token...")
        return await self.fetch_token(client)

    async def fetch_token(self, client: httpx.AsyncClient) -> str:
        """
        Request a new token with the client-credentials grant and cache it.

        Args:
            client: HTTP client

        Returns:
            The new access token

        Raises:
            AuthenticationError: On transport errors, non-2xx answers or malformed bodies
        """
        data = {"grant_type": "client_credentials"}
        if self.scope:
            data["scope"] = self.scope

        try:
            response = await client.post(
                self.token_url,
                data=data,
                auth=httpx.BasicAuth(self.client_id, self.client_secret),
            )
            response.raise_for_status()
            payload = response.json()
            access_token = payload["access_token"]
            expires_in = int(payload.get("expires_in") or self.default_lifetime)
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Error fetching access token: HTTP {e.response.status_code} - {e.response.text}"
            )
            raise AuthenticationError("Failed to authenticate with FatSecret API") from e
        except httpx.RequestError as e:
            logger.error(f"Request error fetching access token from {self.token_url}: {e}")
            raise AuthenticationError("Failed to authenticate with FatSecret API") from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Malformed token response from {self.token_url}: {e!r}")
            raise AuthenticationError("Failed to authenticate with FatSecret API") from e

        if not access_token or not isinstance(access_token, str):
            logger.error("Token response did not contain a usable access_token")
            raise AuthenticationError("Failed to authenticate with FatSecret API")

        # Single assignment of the pair; expiry keeps a safety margin before the real one
        self.access_token, self.token_expiry = (
            access_token,
            self._clock() + (expires_in - self.expiry_margin),
        )

        logger.info(f"Token fetched successfully. Expires in {expires_in} seconds")
        return access_token

    def clear_token(self) -> None:
        """Drop the cached token so the next call fetches a new one."""
        self.access_token = None
        self.token_expiry = None
        logger.info("Token cache cleared")

    def expires_in(self) -> int:
        """Whole seconds until the cached token expires, never negative."""
        if self.token_expiry is None:
            return 0
        return max(0, int(self.token_expiry - self._clock()))

    def status(self) -> TokenStatusResponse:
        return TokenStatusResponse(
            hasToken=self.access_token is not None,
            expiresIn=self.expires_in(),
            expiryTime=isoformat(self.token_expiry) if self.token_expiry is not None else None,
        )
