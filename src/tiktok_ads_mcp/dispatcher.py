"""Generic validate -> transform -> call pipeline shared by every tool."""

import logging
from typing import Any, Mapping, Optional

from .api.auth import TokenRefresher
from .api.base import TikTokAPIClient
from .config import Settings
from .exceptions import UnknownToolError, ValidationError
from .tools.registry import ToolDescriptor, ToolRegistry, build_registry
from .utils.rate_limiter import RateLimiter
from .utils.validators import validate_arguments

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Route tool calls to the TikTok API through their descriptors."""

    def __init__(
        self,
        client: TikTokAPIClient,
        registry: Optional[ToolRegistry] = None,
        ambient: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.client = client
        self.registry = registry if registry is not None else build_registry()
        self.ambient = dict(ambient or {})

    def describe(self, tool_name: str) -> ToolDescriptor:
        descriptor = self.registry.get(tool_name)
        if descriptor is None:
            raise UnknownToolError(tool_name)
        return descriptor

    def prepare(self, tool_name: str, raw_args: Any) -> tuple[ToolDescriptor, dict[str, Any]]:
        """Validate arguments and build the wire payload without calling the API."""
        descriptor = self.describe(tool_name)
        try:
            params = validate_arguments(descriptor.fields, raw_args, self.ambient)
        except ValidationError as e:
            logger.info(f"Tool {tool_name}: rejected {len(e.errors)} invalid parameter(s)")
            raise
        return descriptor, descriptor.transform(params)

    def dispatch(self, tool_name: str, raw_args: Any = None) -> Any:
        """Run one tool call.

        Args:
            tool_name: Registered tool name
            raw_args: Untyped argument object from the caller

        Returns:
            The unwrapped API payload

        Raises:
            UnknownToolError: When no descriptor is registered for ``tool_name``
            ValidationError: When the arguments are invalid (no request is sent)
        """
        descriptor, payload = self.prepare(tool_name, raw_args)
        logger.debug(f"Tool {tool_name}: {descriptor.method} {descriptor.endpoint}")
        return self.client.request(descriptor.method, descriptor.endpoint, payload)


def build_dispatcher(settings: Settings) -> ToolDispatcher:
    """Wire limiter, refresher, client and registry from settings."""
    credentials = settings.credentials
    refresher = TokenRefresher(credentials, settings.base_url) if credentials.can_refresh else None
    client = TikTokAPIClient(
        credentials,
        base_url=settings.base_url,
        rate_limiter=RateLimiter(settings.rate_limit, settings.rate_limit_window_ms),
        refresher=refresher,
    )
    logger.info(
        f"Dispatcher ready: rate limit {settings.rate_limit}/{settings.rate_limit_window_ms}ms, "
        f"token refresh {'enabled' if refresher else 'disabled'}"
    )
    return ToolDispatcher(client, ambient=settings.ambient)
