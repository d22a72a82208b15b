"""Shared fixtures: stub transports, a fake clock and wired dispatchers."""

from typing import Any, Optional
from unittest.mock import Mock

import pytest

from tiktok_ads_mcp.api.auth import TokenRefresher
from tiktok_ads_mcp.api.base import TikTokAPIClient
from tiktok_ads_mcp.config import Credentials
from tiktok_ads_mcp.dispatcher import ToolDispatcher
from tiktok_ads_mcp.utils.rate_limiter import RateLimiter


def make_response(status_code: int = 200, body: Any = None, reason: str = "") -> Mock:
    """Build a stub ``requests.Response``."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def envelope(data: Any = None, code: int = 0, message: str = "OK", request_id: str = "r1") -> dict[str, Any]:
    return {"code": code, "message": message, "data": data, "request_id": request_id}


class FakeClock:
    """Stands in for the ``time`` module; sleeping advances the clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        access_token="old-token",
        refresh_token="refresh-123",
        app_id="app-1",
        app_secret="secret-1",
        advertiser_id="123",
        bc_id="bc-9",
    )


@pytest.fixture
def session() -> Mock:
    """Stub transport for API calls; tests set ``session.request.side_effect``."""
    return Mock()


@pytest.fixture
def auth_session() -> Mock:
    """Stub transport for token exchanges."""
    auth_session = Mock()
    auth_session.post.return_value = make_response(200, envelope({"access_token": "new-token"}))
    return auth_session


@pytest.fixture
def refresher(credentials: Credentials, auth_session: Mock) -> TokenRefresher:
    return TokenRefresher(credentials, "https://api.test/v1", session=auth_session)


@pytest.fixture
def client(credentials: Credentials, session: Mock, refresher: TokenRefresher) -> TikTokAPIClient:
    return TikTokAPIClient(
        credentials,
        base_url="https://api.test/v1",
        rate_limiter=RateLimiter(max_requests=1000, window_ms=1000),
        refresher=refresher,
        session=session,
    )


@pytest.fixture
def dispatcher(client: TikTokAPIClient, credentials: Credentials) -> ToolDispatcher:
    return ToolDispatcher(client, ambient={"advertiser_id": credentials.advertiser_id, "bc_id": credentials.bc_id})


def sent_call(session: Mock, index: int = 0) -> dict[str, Any]:
    """Keyword arguments of the ``index``-th request sent through ``session``."""
    return session.request.call_args_list[index].kwargs


def sent_payload(session: Mock, index: int = 0) -> Optional[dict[str, Any]]:
    kwargs = sent_call(session, index)
    return kwargs.get("json", kwargs.get("params"))
