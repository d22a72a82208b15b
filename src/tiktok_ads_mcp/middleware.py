"""FastMCP middleware that reports protocol-level call failures."""

import logging
import uuid
from typing import Any, Iterable

import pydantic
from fastmcp.server.middleware import Middleware, MiddlewareContext

from .exceptions import UnknownToolError, ValidationError
from .utils.decorators import to_tool_error

logger = logging.getLogger(__name__)


def signature_errors(error: pydantic.ValidationError) -> list[tuple[str, str]]:
    """Flatten a pydantic error into ``(path, message)`` pairs."""
    errors = []
    for detail in error.errors():
        path = ".".join(str(part) for part in detail.get("loc", ())) or "arguments"
        errors.append((path, detail.get("msg", "Invalid value")))
    return errors


class ToolErrorMiddleware(Middleware):
    """Give unknown tools and signature mismatches the same error bodies as tool failures.

    FastMCP checks arguments against each tool's signature before the tool
    body runs, so those failures never reach ``handle_tiktok_api_errors``.
    """

    def __init__(self, tool_names: Iterable[str]) -> None:
        self.tool_names = frozenset(tool_names)

    async def on_call_tool(self, context: MiddlewareContext, call_next: Any) -> Any:
        tool_name = context.message.name
        if tool_name not in self.tool_names:
            request_id = str(uuid.uuid4())
            logger.warning(f"Request {request_id}: Unknown tool {tool_name}")
            raise to_tool_error(UnknownToolError(tool_name), request_id)

        try:
            return await call_next(context)
        except pydantic.ValidationError as e:
            request_id = str(uuid.uuid4())
            error = ValidationError(signature_errors(e))
            logger.info(f"Request {request_id}: {tool_name} rejected {len(error.errors)} invalid parameter(s)")
            raise to_tool_error(error, request_id) from e
