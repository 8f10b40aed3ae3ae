"""
Shared fixtures: a controllable clock and an in-process fake of the
FatSecret OAuth and image recognition servers.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from food_proxy.clients.token_cache import TokenCache
from food_proxy.core.config import Settings
from food_proxy.main import create_app

TOKEN_URL = "https://oauth.test/connect/token"
RECOGNITION_URL = "https://platform.test/rest/image-recognition/v2"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFatSecret:
    """Answers token and recognition calls; records what it was sent."""

    def __init__(self):
        self.token_requests = []
        self.recognition_requests = []
        self.token_status = 200
        self.token_body = None
        self.expires_in = 3600
        self.recognition_status = 200
        self.recognition_body = {"foods": [{"food_name": "Apple"}]}
        self.recognition_exc = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/connect/token"):
            self.token_requests.append(request)
            if self.token_body is not None:
                return httpx.Response(self.token_status, content=self.token_body)
            return httpx.Response(
                self.token_status,
                json={
                    "access_token": f"token-{len(self.token_requests)}",
                    "expires_in": self.expires_in,
                    "token_type": "Bearer",
                },
            )

        self.recognition_requests.append(request)
        if self.recognition_exc is not None:
            raise self.recognition_exc(f"{self.recognition_exc.__name__}", request=request)
        if isinstance(self.recognition_body, (dict, list)):
            return httpx.Response(self.recognition_status, json=self.recognition_body)
        return httpx.Response(self.recognition_status, text=self.recognition_body)

    def last_payload(self) -> dict:
        return json.loads(self.recognition_requests[-1].content)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fatsecret():
    return FakeFatSecret()


@pytest.fixture
def http_client(fatsecret):
    return httpx.AsyncClient(transport=httpx.MockTransport(fatsecret.handler))


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        FATSECRET_CLIENT_ID="test-id",
        FATSECRET_CLIENT_SECRET="test-secret",
        FATSECRET_TOKEN_URL=TOKEN_URL,
        FATSECRET_RECOGNITION_URL=RECOGNITION_URL,
        CORS_ORIGINS="*",
    )


@pytest.fixture
def token_cache(settings, clock):
    return TokenCache.from_settings(settings, clock=clock)


@pytest.fixture
def app(settings, http_client, token_cache):
    return create_app(settings=settings, http_client=http_client, token_cache=token_cache)


@pytest.fixture
def client(app):
    return TestClient(app)
