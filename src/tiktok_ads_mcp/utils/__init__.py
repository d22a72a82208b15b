"""Utility modules for TikTok API operations."""

from .decorators import format_error_response, handle_tiktok_api_errors, to_tool_error
from .rate_limiter import RateLimiter
from .validators import (
    FieldSpec,
    validate_arguments,
    validate_date,
    validate_datetime,
)

__all__ = [
    "FieldSpec",
    "RateLimiter",
    "format_error_response",
    "handle_tiktok_api_errors",
    "to_tool_error",
    "validate_arguments",
    "validate_date",
    "validate_datetime",
]
