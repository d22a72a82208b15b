"""Tests for the authenticated TikTok API client."""

import json
from unittest.mock import patch

import pytest
import requests

from conftest import envelope, make_response, sent_call
from tiktok_ads_mcp.api.base import TikTokAPIClient, encode_query_params
from tiktok_ads_mcp.exceptions import (
    AuthenticationError,
    RateLimitError,
    TikTokAPIError,
    TransportError,
)
from tiktok_ads_mcp.utils.rate_limiter import RateLimiter


@pytest.fixture
def mock_time():
    with patch("tiktok_ads_mcp.api.base.time") as mocked:
        yield mocked


class TestRequestShape:
    """Test how outbound requests are built."""

    def test_post_sends_json_body_with_credential_headers(self, client, session):
        session.request.return_value = make_response(200, envelope({"campaign_id": "c1"}))

        result = client.request("POST", "/campaign/create/", {"advertiser_id": "123"})

        assert result == {"campaign_id": "c1"}
        kwargs = sent_call(session)
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == "https://api.test/v1/campaign/create/"
        assert kwargs["json"] == {"advertiser_id": "123"}
        assert "params" not in kwargs
        assert kwargs["headers"]["Access-Token"] == "old-token"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["timeout"] == 30

    def test_get_sends_query_params(self, client, session):
        session.request.return_value = make_response(200, envelope({"list": []}))

        client.request("get", "/campaign/get/", {"advertiser_id": "123", "filtering": {"campaign_ids": ["1"]}})

        kwargs = sent_call(session)
        assert kwargs["method"] == "GET"
        assert "json" not in kwargs
        assert kwargs["params"] == {"advertiser_id": "123", "filtering": '{"campaign_ids":["1"]}'}

    def test_missing_data_returns_empty_dict(self, client, session):
        session.request.return_value = make_response(200, {"code": 0, "message": "OK", "request_id": "r1"})

        assert client.request("POST", "/campaign/update/", {}) == {}

    def test_each_attempt_is_admitted_by_the_rate_limiter(self, credentials, session):
        limiter = RateLimiter(max_requests=100, window_ms=1000)
        client = TikTokAPIClient(credentials, "https://api.test/v1", rate_limiter=limiter, session=session)
        session.request.side_effect = [
            make_response(429, envelope(code=51000, message="Too many requests")),
            make_response(200, envelope({})),
        ]

        with patch("tiktok_ads_mcp.api.base.time"):
            client.request("GET", "/tool/language/", {})

        assert len(limiter.timestamps) == 2


class TestEncodeQueryParams:
    def test_encodes_collections_and_booleans(self):
        params = encode_query_params({"ids": ["a", "b"], "flag": True, "page": 2, "skip": None})

        assert params == {"ids": '["a","b"]', "flag": "true", "page": 2}

    def test_empty_payload(self):
        assert encode_query_params(None) == {}


class TestEnvelopeHandling:
    """Test logical failures reported inside HTTP 200 responses."""

    def test_non_zero_code_raises_api_error(self, client, session):
        session.request.return_value = make_response(
            200, envelope(code=40100, message="invalid advertiser", request_id="req-9")
        )

        with pytest.raises(TikTokAPIError) as exc_info:
            client.request("GET", "/advertiser/info/", {})

        error = exc_info.value
        assert "invalid advertiser" in str(error)
        assert error.code == 40100
        assert error.request_id == "req-9"
        assert error.endpoint == "/advertiser/info/"

    def test_malformed_body_raises_transport_error(self, client, session):
        session.request.return_value = make_response(200, ValueError("not json"))

        with pytest.raises(TransportError):
            client.request("GET", "/tool/language/", {})

    def test_body_without_code_raises_transport_error(self, client, session):
        session.request.return_value = make_response(200, ["unexpected"])

        with pytest.raises(TransportError):
            client.request("GET", "/tool/language/", {})


class TestRateLimitRetry:
    """Test the single cooldown retry on HTTP 429."""

    def test_retries_once_after_cooldown(self, client, session, mock_time):
        session.request.side_effect = [
            make_response(429, envelope(code=51000, message="Too many requests")),
            make_response(200, envelope({"ok": True})),
        ]

        assert client.request("GET", "/tool/language/", {}) == {"ok": True}
        mock_time.sleep.assert_called_once_with(5)
        assert session.request.call_count == 2

    def test_second_429_raises_rate_limit_error(self, client, session, mock_time):
        session.request.return_value = make_response(429, None)

        with pytest.raises(RateLimitError) as exc_info:
            client.request("GET", "/tool/language/", {})

        assert exc_info.value.retry_after == 5
        assert session.request.call_count == 2
        mock_time.sleep.assert_called_once_with(5)

    def test_retry_failing_differently_surfaces_that_error(self, client, session, mock_time):
        session.request.side_effect = [
            make_response(429, None),
            make_response(200, envelope(code=40002, message="budget too low")),
        ]

        with pytest.raises(TikTokAPIError, match="budget too low"):
            client.request("POST", "/campaign/create/", {})


class TestAuthRetry:
    """Test the single refresh-and-retry on HTTP 401."""

    def test_refreshes_once_and_retries_with_new_token(self, client, session, auth_session, credentials):
        session.request.side_effect = [
            make_response(401, envelope(code=40105, message="Access token expired")),
            make_response(200, envelope({"ok": True})),
        ]

        assert client.request("GET", "/tool/language/", {}) == {"ok": True}
        assert auth_session.post.call_count == 1
        assert sent_call(session, 0)["headers"]["Access-Token"] == "old-token"
        assert sent_call(session, 1)["headers"]["Access-Token"] == "new-token"
        assert credentials.access_token == "new-token"

    def test_second_401_raises_authentication_error(self, client, session, auth_session):
        session.request.return_value = make_response(401, envelope(code=40105, message="Access token expired"))

        with pytest.raises(AuthenticationError):
            client.request("GET", "/tool/language/", {})

        assert auth_session.post.call_count == 1
        assert session.request.call_count == 2

    def test_401_without_refresher(self, credentials, session):
        client = TikTokAPIClient(credentials, "https://api.test/v1", session=session)
        session.request.return_value = make_response(401, None)

        with pytest.raises(AuthenticationError, match="not configured"):
            client.request("GET", "/tool/language/", {})

        assert session.request.call_count == 1

    def test_failed_refresh_raises_authentication_error(self, client, session, auth_session):
        session.request.return_value = make_response(401, None)
        auth_session.post.return_value = make_response(200, envelope(code=40001, message="invalid secret"))

        with pytest.raises(AuthenticationError, match="invalid secret"):
            client.request("GET", "/tool/language/", {})

        assert session.request.call_count == 1


class TestTransportFailures:
    """Test HTTP status and network failures."""

    def test_other_status_raises_api_error_with_context(self, client, session):
        session.request.return_value = make_response(
            500, envelope(code=50000, message="System error"), reason="Internal Server Error"
        )

        with pytest.raises(TikTokAPIError) as exc_info:
            client.request("GET", "/ad/get/", {})

        error = exc_info.value
        assert error.status_code == 500
        assert "System error" in str(error)
        assert "https://api.test/v1/ad/get/" in str(error)

    def test_status_error_without_json_body(self, client, session):
        session.request.return_value = make_response(503, ValueError("html"), reason="Service Unavailable")

        with pytest.raises(TikTokAPIError, match="Service Unavailable"):
            client.request("GET", "/ad/get/", {})

    def test_timeout_raises_transport_error(self, client, session):
        session.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(TransportError, match="timed out after 30s"):
            client.request("GET", "/ad/get/", {})

    def test_connection_error_raises_transport_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TransportError, match="ConnectionError"):
            client.request("GET", "/ad/get/", {})

    def test_errors_do_not_leak_credentials(self, client, session, credentials):
        session.request.return_value = make_response(500, envelope(code=50000, message="System error"))

        with pytest.raises(TikTokAPIError) as exc_info:
            client.request("GET", "/ad/get/", {})

        rendered = json.dumps(vars(exc_info.value), default=str) + str(exc_info.value)
        assert credentials.access_token not in rendered
