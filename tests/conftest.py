from typing import Any, Callable
from unittest.mock import AsyncMock

import httpx
import jwt
import pytest

from duo_universal import constants
from duo_universal.client import Client
from duo_universal.primitives.security import get_time_in_seconds

CLIENT_ID = "DIXXXXXXXXXXXXXXXXXX"
CLIENT_SECRET = "deadbeefdeadbeefdeadbeefdeadbeefdeadbeef"
API_HOST = "api-123456.duo.com"
REDIRECT_URL = "https://redirect-example.com/callback"
USERNAME = "username"
NONCE = "abcdefghijklmnopqrst"

TOKEN_ENDPOINT = f"https://{API_HOST}{constants.TOKEN_ENDPOINT}"


@pytest.fixture
def client_options() -> dict[str, Any]:
    return {
        "client_id": CLIENT_ID,
        "client_secret": CLIENT_SECRET,
        "api_host": API_HOST,
        "redirect_url": REDIRECT_URL,
    }


@pytest.fixture
def duo_client(client_options) -> Client:
    """Client whose HTTP layer is replaced by an AsyncMock."""
    client = Client(**client_options)
    client.transport._http_client = AsyncMock()
    return client


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Build a real httpx.Response bound to a request, so raise_for_status works."""

    def _make(
        status_code: int = 200,
        json: Any = None,
        content: bytes | None = None,
        url: str = TOKEN_ENDPOINT,
    ) -> httpx.Response:
        request = httpx.Request("POST", url)
        if content is not None:
            return httpx.Response(status_code, content=content, request=request)
        return httpx.Response(status_code, json=json, request=request)

    return _make


@pytest.fixture
def id_token_claims() -> dict[str, Any]:
    now = get_time_in_seconds()
    return {
        "exp": now + constants.JWT_EXPIRATION,
        "iat": now,
        "nbf": now,
        "sub": USERNAME,
        "iss": TOKEN_ENDPOINT,
        "aud": CLIENT_ID,
        "preferred_username": USERNAME,
        "nonce": NONCE,
        "auth_result": {"result": "allow", "status": "allow", "status_msg": "Login Successful"},
    }


@pytest.fixture
def make_id_token(id_token_claims) -> Callable[..., str]:
    """Sign an id token like Duo would, optionally dropping or overriding claims."""

    def _make(
        remove: str | None = None,
        secret: str = CLIENT_SECRET,
        algorithm: str = constants.SIG_ALGORITHM,
        **overrides: Any,
    ) -> str:
        claims = {**id_token_claims, **overrides}
        if remove:
            claims.pop(remove)
        return jwt.encode(claims, secret, algorithm=algorithm)

    return _make


@pytest.fixture
def token_result(make_id_token) -> Callable[..., dict[str, Any]]:
    def _make(id_token: str | None = None) -> dict[str, Any]:
        return {
            "id_token": id_token or make_id_token(),
            "access_token": "12345678",
            "expires_in": 3600,
            "token_type": "Bearer",
        }

    return _make


@pytest.fixture
def nonce() -> str:
    return NONCE
