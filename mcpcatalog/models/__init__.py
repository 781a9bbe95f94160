"""Pydantic data models for mcpcatalog."""

from mcpcatalog.models.capability import (
    CapabilityKind,
    HandlerMissingError,
    PromptArgument,
    ServerPrompt,
    ServerResourceTemplate,
    ServerTool,
    ToolsetMetadata,
)
from mcpcatalog.models.filters import FilterConfig

__all__ = [
    # Capabilities
    "CapabilityKind",
    "ToolsetMetadata",
    "ServerTool",
    "ServerResourceTemplate",
    "ServerPrompt",
    "PromptArgument",
    "HandlerMissingError",
    # Filters
    "FilterConfig",
]
