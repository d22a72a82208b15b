"""Common exceptions for the tiktok-ads-mcp package."""

from typing import Optional


class TikTokMCPError(Exception):
    """Base class for all errors raised by the gateway."""

    mcp_error_code = "InternalError"


class ValidationError(TikTokMCPError):
    """Raised when tool arguments fail schema validation.

    ``errors`` holds one ``(field_path, message)`` pair per violation.
    """

    mcp_error_code = "InvalidParams"

    def __init__(self, errors: list[tuple[str, str]]) -> None:
        self.errors = list(errors)
        joined = "; ".join(f"{path}: {message}" for path, message in self.errors)
        super().__init__(f"Invalid parameters: {joined}")


class ConfigurationError(TikTokMCPError):
    """Raised when required configuration is missing or malformed."""


class AuthenticationError(TikTokMCPError):
    """Raised when the access token is rejected and cannot be refreshed."""

    mcp_error_code = "InvalidRequest"


class RateLimitError(TikTokMCPError):
    """Raised when the API keeps throttling after the cooldown retry."""

    def __init__(self, message: str, retry_after: int = 5) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class TikTokAPIError(TikTokMCPError):
    """Raised when the API reports a failure, either in the envelope or via HTTP status."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
        request_id: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.request_id = request_id
        self.endpoint = endpoint


class TransportError(TikTokMCPError):
    """Raised on timeouts, connection failures and unreadable response bodies."""


class UnknownToolError(TikTokMCPError):
    """Raised when a tool name has no registered descriptor."""

    mcp_error_code = "UnknownTool"

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name
