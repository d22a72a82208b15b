"""Tests for tool error handling."""

import asyncio
import json

import pytest
from fastmcp.exceptions import ToolError

from tiktok_ads_mcp.exceptions import (
    AuthenticationError,
    RateLimitError,
    TikTokAPIError,
    UnknownToolError,
    ValidationError,
)
from tiktok_ads_mcp.utils.decorators import handle_tiktok_api_errors


def raise_in_tool(error: Exception) -> dict:
    @handle_tiktok_api_errors
    def failing_tool() -> str:
        raise error

    with pytest.raises(ToolError) as exc_info:
        failing_tool()
    return json.loads(str(exc_info.value))


def test_success_passes_through():
    @handle_tiktok_api_errors
    def tool(name: str) -> str:
        return f"hello {name}"

    assert tool("world") == "hello world"
    assert tool.__name__ == "tool"


def test_validation_error_lists_fields():
    body = raise_in_tool(ValidationError([("budget", "Must be greater than 0"), ("budget_mode", "Required")]))

    assert body["success"] is False
    assert body["error"] == "InvalidParams"
    assert body["details"] == [
        {"field": "budget", "message": "Must be greater than 0"},
        {"field": "budget_mode", "message": "Required"},
    ]
    assert "request_id" in body["metadata"]


def test_unknown_tool_code():
    assert raise_in_tool(UnknownToolError("nope"))["error"] == "UnknownTool"


def test_authentication_error_code():
    assert raise_in_tool(AuthenticationError("rejected"))["error"] == "InvalidRequest"


def test_api_error_carries_upstream_context():
    body = raise_in_tool(
        TikTokAPIError("invalid advertiser", code=40100, status_code=200, request_id="r1", endpoint="/ad/get/")
    )

    assert body["error"] == "InternalError"
    assert body["message"] == "invalid advertiser"
    assert body["details"] == [{"code": 40100, "status_code": 200, "request_id": "r1", "endpoint": "/ad/get/"}]


def test_rate_limit_error_includes_retry_after():
    body = raise_in_tool(RateLimitError("slow down", retry_after=5))

    assert body["retry_after"] == 5


def test_unexpected_error_is_internal():
    body = raise_in_tool(KeyError("boom"))

    assert body["error"] == "InternalError"
    assert "boom" in body["message"]


def test_coroutine_tools_are_wrapped():
    @handle_tiktok_api_errors
    async def tool(name: str) -> str:
        return f"hello {name}"

    @handle_tiktok_api_errors
    async def failing_tool() -> str:
        raise UnknownToolError("nope")

    assert asyncio.run(tool("world")) == "hello world"
    with pytest.raises(ToolError) as exc_info:
        asyncio.run(failing_tool())
    assert json.loads(str(exc_info.value))["error"] == "UnknownTool"
