"""Access token refresh for the TikTok Business API."""

import logging
from threading import Lock
from typing import Optional

import requests

from ..config import Credentials
from ..constants import API_BASE_URL, AUTH_PATH, REQUEST_TIMEOUT_SECONDS
from ..exceptions import ConfigurationError, TikTokAPIError, TransportError

logger = logging.getLogger(__name__)


class TokenRefresher:
    """Exchange the configured refresh credential for a new access token.

    Only one exchange runs at a time. Callers pass the token that was
    rejected; if another caller has already replaced it, the current token is
    returned without a second exchange.
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = API_BASE_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.credentials = credentials
        self.url = f"{base_url}{AUTH_PATH}"
        self.session = session or requests.Session()
        self.lock = Lock()
        self.refresh_count = 0

    def refresh(self, stale_token: Optional[str] = None) -> str:
        """Refresh the shared access token.

        Args:
            stale_token: The token the caller saw rejected

        Returns:
            The access token to retry with

        Raises:
            ConfigurationError: When app id, app secret or refresh token are missing
            TikTokAPIError: When the exchange is rejected
            TransportError: When the exchange cannot be completed
        """
        if not self.credentials.can_refresh:
            raise ConfigurationError(
                "Cannot refresh token: missing TIKTOK_APP_ID, TIKTOK_APP_SECRET or TIKTOK_REFRESH_TOKEN"
            )

        with self.lock:
            if stale_token is not None and self.credentials.access_token != stale_token:
                logger.info("Access token already refreshed by a concurrent call, reusing it")
                return self.credentials.access_token

            access_token = self._exchange()
            self.credentials.access_token = access_token
            self.refresh_count += 1
            logger.info("Access token refreshed successfully")
            return access_token

    def _exchange(self) -> str:
        body = {
            "app_id": self.credentials.app_id,
            "secret": self.credentials.app_secret,
            "auth_code": self.credentials.refresh_token,
            "grant_type": "authorization_code",
        }

        try:
            response = self.session.post(self.url, json=body, timeout=REQUEST_TIMEOUT_SECONDS)
        except requests.Timeout as e:
            raise TransportError(f"Token refresh timed out after {REQUEST_TIMEOUT_SECONDS}s") from e
        except requests.RequestException as e:
            raise TransportError(f"Token refresh request failed: {e.__class__.__name__}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Token refresh failed with HTTP {response.status_code}")
            raise TikTokAPIError(
                f"Token refresh failed: HTTP {response.status_code}",
                status_code=response.status_code,
                endpoint=AUTH_PATH,
            )

        try:
            envelope = response.json()
        except ValueError as e:
            raise TransportError("Token refresh returned a malformed response body") from e

        if not isinstance(envelope, dict):
            raise TransportError("Token refresh returned a malformed response body")

        if envelope.get("code") != 0:
            logger.error(f"Token refresh rejected with code {envelope.get('code')}")
            raise TikTokAPIError(
                f"Token refresh failed: {envelope.get('message', 'unknown error')}",
                code=envelope.get("code"),
                status_code=response.status_code,
                request_id=envelope.get("request_id"),
                endpoint=AUTH_PATH,
            )

        data = envelope.get("data") or {}
        access_token = data.get("access_token")
        if not access_token:
            raise TikTokAPIError("Token refresh response did not include an access token", code=0, endpoint=AUTH_PATH)

        if data.get("refresh_token"):
            self.credentials.refresh_token = data["refresh_token"]

        return str(access_token)
