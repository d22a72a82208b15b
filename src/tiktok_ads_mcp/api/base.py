"""Authenticated HTTP client for TikTok Business API interactions."""

import json
import logging
import time
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import requests

from ..config import Credentials
from ..constants import (
    API_BASE_URL,
    MAX_AUTH_RETRIES,
    MAX_RATE_LIMIT_RETRIES,
    RATE_LIMIT_COOLDOWN_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
    USER_AGENT,
)
from ..exceptions import (
    AuthenticationError,
    RateLimitError,
    TikTokAPIError,
    TikTokMCPError,
    TransportError,
)
from ..utils.rate_limiter import RateLimiter
from .auth import TokenRefresher

logger = logging.getLogger(__name__)


def encode_query_params(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Encode a payload as query parameters.

    The API expects arrays and objects in query strings as JSON text.
    """
    params: Dict[str, Any] = {}
    for key, value in (payload or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, dict)):
            params[key] = json.dumps(value, separators=(",", ":"))
        elif isinstance(value, bool):
            params[key] = "true" if value else "false"
        else:
            params[key] = value
    return params


class TikTokAPIClient:
    """Client that issues every TikTok API call.

    Each call is admitted by the rate limiter, carries the shared access
    token, and is retried at most once after a 429 and at most once after a
    401 (when a refresher is available).
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = API_BASE_URL,
        rate_limiter: Optional[RateLimiter] = None,
        refresher: Optional[TokenRefresher] = None,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Shared credential set; the access token is read on every attempt
            base_url: API base URL
            rate_limiter: Admission control for outbound calls
            refresher: Token refresher, or None when refresh is not configured
            session: HTTP session (a stub in tests)
            timeout: Per-attempt timeout in seconds
        """
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter()
        self.refresher = refresher
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Access-Token": access_token,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def request(self, method: str, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Make an authenticated request and unwrap the response envelope.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API path relative to the base URL
            payload: Query parameters for GET, JSON body otherwise

        Returns:
            The envelope's ``data`` payload

        Raises:
            AuthenticationError: Token rejected and refresh unavailable or exhausted
            RateLimitError: Throttled again after the cooldown retry
            TikTokAPIError: Non-zero envelope code or non-2xx status
            TransportError: Timeout, network error or malformed body
        """
        method = method.upper()
        request_id = uuid.uuid4().hex[:12]
        url = f"{self.base_url}{endpoint}"
        auth_retries = 0
        rate_limit_retries = 0

        while True:
            self.rate_limiter.wait_if_needed()

            access_token = self.credentials.access_token
            response = self._send(request_id, method, url, endpoint, payload, access_token)

            if response.status_code == 429:
                if rate_limit_retries >= MAX_RATE_LIMIT_RETRIES:
                    logger.error(f"Request {request_id}: Still rate limited after retry on {endpoint}")
                    raise RateLimitError(
                        f"TikTok API rate limit exceeded for {endpoint}", retry_after=RATE_LIMIT_COOLDOWN_SECONDS
                    )
                rate_limit_retries += 1
                logger.warning(
                    f"Request {request_id}: Rate limited on {endpoint}, retrying in {RATE_LIMIT_COOLDOWN_SECONDS}s"
                )
                time.sleep(RATE_LIMIT_COOLDOWN_SECONDS)
                continue

            if response.status_code == 401:
                if self.refresher is None:
                    raise AuthenticationError(
                        f"TikTok API authentication failed for {endpoint} and token refresh is not configured"
                    )
                if auth_retries >= MAX_AUTH_RETRIES:
                    raise AuthenticationError(
                        f"TikTok API authentication failed for {endpoint} after refreshing the access token"
                    )
                auth_retries += 1
                logger.warning(f"Request {request_id}: Access token rejected on {endpoint}, refreshing")
                try:
                    self.refresher.refresh(stale_token=access_token)
                except TikTokMCPError as e:
                    raise AuthenticationError(
                        f"TikTok API authentication failed and token refresh failed: {e}"
                    ) from e
                continue

            return self._unwrap(request_id, response, url, endpoint)

    def _send(
        self,
        request_id: str,
        method: str,
        url: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]],
        access_token: str,
    ) -> requests.Response:
        start_time = datetime.now()
        logger.info(f"Request {request_id}: Starting {method} {endpoint}")

        kwargs: Dict[str, Any] = {}
        if method == "GET":
            kwargs["params"] = encode_query_params(payload)
        elif payload is not None:
            kwargs["json"] = payload

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=self._headers(access_token),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as e:
            duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
            logger.error(f"Request {request_id}: Timed out in {duration_ms}ms")
            raise TransportError(f"Request to {endpoint} timed out after {self.timeout:g}s") from e
        except requests.RequestException as e:
            duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
            logger.error(f"Request {request_id}: Transport error in {duration_ms}ms: {e.__class__.__name__}")
            raise TransportError(f"Request to {endpoint} failed: {e.__class__.__name__}: {e}") from e

        duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
        logger.info(f"Request {request_id}: Completed in {duration_ms}ms, status={response.status_code}")
        return response

    def _unwrap(self, request_id: str, response: requests.Response, url: str, endpoint: str) -> Any:
        try:
            envelope = response.json()
        except ValueError:
            envelope = None

        if not 200 <= response.status_code < 300:
            message = envelope.get("message") if isinstance(envelope, dict) else None
            logger.error(f"Request {request_id}: HTTP error status={response.status_code} url={url}")
            raise TikTokAPIError(
                f"TikTok API error (HTTP {response.status_code}) at {url}: {message or response.reason or 'no message'}",
                code=envelope.get("code") if isinstance(envelope, dict) else None,
                status_code=response.status_code,
                request_id=envelope.get("request_id") if isinstance(envelope, dict) else None,
                endpoint=endpoint,
            )

        if not isinstance(envelope, dict) or "code" not in envelope:
            raise TransportError(f"Malformed response body from {endpoint}")

        if envelope["code"] != 0:
            logger.warning(
                f"Request {request_id}: API returned code={envelope['code']} "
                f"request_id={envelope.get('request_id')}"
            )
            raise TikTokAPIError(
                f"TikTok API error {envelope['code']} at {endpoint}: {envelope.get('message', 'no message')}",
                code=envelope["code"],
                status_code=response.status_code,
                request_id=envelope.get("request_id"),
                endpoint=endpoint,
            )

        data = envelope.get("data")
        return {} if data is None else data
