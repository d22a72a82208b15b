"""Tool descriptors and schemas."""

from .registry import TOOL_DESCRIPTORS, ToolDescriptor, ToolRegistry, build_registry

__all__ = ["TOOL_DESCRIPTORS", "ToolDescriptor", "ToolRegistry", "build_registry"]
