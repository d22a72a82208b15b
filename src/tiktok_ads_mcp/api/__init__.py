"""TikTok Business API client modules."""

from .auth import TokenRefresher
from .base import TikTokAPIClient, encode_query_params

__all__ = ["TikTokAPIClient", "TokenRefresher", "encode_query_params"]
