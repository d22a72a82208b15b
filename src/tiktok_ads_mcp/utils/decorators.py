"""Decorators for TikTok API error handling."""

import functools
import inspect
import json
import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Optional

from fastmcp.exceptions import ToolError

from ..exceptions import RateLimitError, TikTokAPIError, TikTokMCPError, ValidationError

logger = logging.getLogger(__name__)


def format_error_response(
    error_code: str,
    message: str,
    request_id: str,
    details: Optional[list] = None,
    retry_after: Optional[int] = None,
) -> dict[str, Any]:
    """Build the JSON error body returned to MCP clients.

    Args:
        error_code: Machine-readable code (UnknownTool, InvalidParams, InternalError, InvalidRequest)
        message: Human-readable error message
        request_id: Id correlating the response with log lines
        details: Optional error details
        retry_after: For rate limit errors, seconds to wait

    Returns:
        Formatted error response
    """
    response: dict[str, Any] = {
        "success": False,
        "error": error_code,
        "message": message,
        "metadata": {
            "timestamp": datetime.now().isoformat() + "Z",
            "request_id": request_id,
        },
    }

    if details:
        response["details"] = details
    if retry_after:
        response["retry_after"] = retry_after

    return response


def _details_for(error: TikTokMCPError) -> Optional[list]:
    if isinstance(error, ValidationError):
        return [{"field": path, "message": message} for path, message in error.errors]
    if isinstance(error, TikTokAPIError):
        detail = {
            "code": error.code,
            "status_code": error.status_code,
            "request_id": error.request_id,
            "endpoint": error.endpoint,
        }
        return [{key: value for key, value in detail.items() if value is not None}]
    return None


def to_tool_error(error: Exception, request_id: str) -> ToolError:
    """Wrap a failure in a ToolError whose text is the JSON error body."""
    if isinstance(error, TikTokMCPError):
        response = format_error_response(
            error.mcp_error_code,
            str(error),
            request_id,
            details=_details_for(error),
            retry_after=error.retry_after if isinstance(error, RateLimitError) else None,
        )
    else:
        response = format_error_response(
            "InternalError",
            f"An unexpected error occurred: {error!s}",
            request_id,
        )
    return ToolError(json.dumps(response, indent=2))


def _elapsed_ms(start_time: datetime) -> int:
    return int((datetime.now() - start_time).total_seconds() * 1000)


def _log_failure(request_id: str, name: str, start_time: datetime, error: Exception) -> None:
    duration_ms = _elapsed_ms(start_time)
    if isinstance(error, TikTokMCPError):
        logger.warning(
            f"Request {request_id}: {name} failed in {duration_ms}ms "
            f"with {error.__class__.__name__}: {error}"
        )
    else:
        logger.exception(f"Request {request_id}: Unexpected error in {duration_ms}ms: {error}")


def handle_tiktok_api_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator turning gateway failures into MCP tool errors.

    The error text is a JSON body with a machine-readable ``error`` code, so
    clients see ``isError`` results they can still parse. Both plain and
    coroutine functions are supported.

    Args:
        func: The tool function to decorate

    Returns:
        Decorated function that reports errors consistently
    """
    name = func.__name__

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            request_id = str(uuid.uuid4())
            start_time = datetime.now()
            logger.info(f"Request {request_id}: Starting {name}")

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_failure(request_id, name, start_time, e)
                raise to_tool_error(e, request_id) from e

            logger.info(f"Request {request_id}: Completed {name} in {_elapsed_ms(start_time)}ms")
            return result

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        request_id = str(uuid.uuid4())
        start_time = datetime.now()
        logger.info(f"Request {request_id}: Starting {name}")

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _log_failure(request_id, name, start_time, e)
            raise to_tool_error(e, request_id) from e

        logger.info(f"Request {request_id}: Completed {name} in {_elapsed_ms(start_time)}ms")
        return result

    return wrapper
