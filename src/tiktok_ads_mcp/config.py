"""Configuration loading for the TikTok Ads MCP server."""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from .constants import (
    API_BASE_URL,
    DEFAULT_RATE_LIMIT,
    DEFAULT_RATE_LIMIT_WINDOW_MS,
    ENV_ACCESS_TOKEN,
    ENV_ADVERTISER_ID,
    ENV_APP_ID,
    ENV_APP_SECRET,
    ENV_BASE_URL,
    ENV_BC_ID,
    ENV_LOG_LEVEL,
    ENV_RATE_LIMIT,
    ENV_RATE_LIMIT_WINDOW_MS,
    ENV_REFRESH_TOKEN,
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    """Process-wide credential set.

    Everything is fixed after startup except ``access_token``, which the
    token refresher replaces in place.
    """

    access_token: str
    refresh_token: Optional[str] = None
    app_id: Optional[str] = None
    app_secret: Optional[str] = None
    advertiser_id: Optional[str] = None
    bc_id: Optional[str] = None

    @property
    def can_refresh(self) -> bool:
        return bool(self.app_id and self.app_secret and self.refresh_token)

    def __repr__(self) -> str:
        return (
            f"Credentials(advertiser_id={self.advertiser_id!r}, bc_id={self.bc_id!r}, "
            f"can_refresh={self.can_refresh})"
        )


@dataclass
class Settings:
    credentials: Credentials
    base_url: str = API_BASE_URL
    rate_limit: int = DEFAULT_RATE_LIMIT
    rate_limit_window_ms: int = DEFAULT_RATE_LIMIT_WINDOW_MS
    log_level: str = "INFO"
    ambient: dict[str, str] = field(init=False)

    def __post_init__(self) -> None:
        self.ambient = {
            name: value
            for name, value in (
                ("advertiser_id", self.credentials.advertiser_id),
                ("bc_id", self.credentials.bc_id),
            )
            if value
        }


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be greater than 0, got {value}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Assemble settings from the environment.

    Args:
        env: Mapping to read instead of ``os.environ``. When omitted, a local
            ``.env`` file is loaded first.

    Returns:
        Settings instance with a fresh credential set

    Raises:
        ConfigurationError: When the access token is missing or an override is malformed
    """
    if env is None:
        load_dotenv()
        env = os.environ

    def _get(name: str) -> Optional[str]:
        value = env.get(name, "").strip()
        return value or None

    access_token = _get(ENV_ACCESS_TOKEN)
    if not access_token:
        raise ConfigurationError(
            f"Missing required TikTok credentials. Please set the {ENV_ACCESS_TOKEN} environment variable."
        )

    credentials = Credentials(
        access_token=access_token,
        refresh_token=_get(ENV_REFRESH_TOKEN),
        app_id=_get(ENV_APP_ID),
        app_secret=_get(ENV_APP_SECRET),
        advertiser_id=_get(ENV_ADVERTISER_ID),
        bc_id=_get(ENV_BC_ID),
    )

    if credentials.refresh_token and not credentials.can_refresh:
        logger.warning(
            f"{ENV_REFRESH_TOKEN} is set but {ENV_APP_ID}/{ENV_APP_SECRET} are missing; token refresh disabled"
        )
    if not credentials.advertiser_id:
        logger.info(f"{ENV_ADVERTISER_ID} not set; advertiser_id must be passed with each tool call")

    return Settings(
        credentials=credentials,
        base_url=(_get(ENV_BASE_URL) or API_BASE_URL).rstrip("/"),
        rate_limit=_positive_int(env, ENV_RATE_LIMIT, DEFAULT_RATE_LIMIT),
        rate_limit_window_ms=_positive_int(env, ENV_RATE_LIMIT_WINDOW_MS, DEFAULT_RATE_LIMIT_WINDOW_MS),
        log_level=(_get(ENV_LOG_LEVEL) or "INFO").upper(),
    )
