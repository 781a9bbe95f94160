"""Capability registry: builder, filter pipeline, aliases and request scoping."""

from mcpcatalog.core.registry.aliases import AliasResolver
from mcpcatalog.core.registry.builder import Builder
from mcpcatalog.core.registry.errors import (
    CapabilityNotFoundError,
    MisdeclaredCapabilityError,
    RegistryError,
    ToolDoesNotExistError,
    ToolsetDoesNotExistError,
)
from mcpcatalog.core.registry.flags import (
    CachedFeatureChecker,
    FeatureChecker,
    FileFeatureChecker,
    HttpFeatureChecker,
    StaticFeatureChecker,
)
from mcpcatalog.core.registry.registry import Registry
from mcpcatalog.core.registry.scoping import (
    MCP_METHOD_INITIALIZE,
    MCP_METHOD_PROMPTS_GET,
    MCP_METHOD_PROMPTS_LIST,
    MCP_METHOD_RESOURCES_LIST,
    MCP_METHOD_RESOURCES_READ,
    MCP_METHOD_RESOURCES_TEMPLATES_LIST,
    MCP_METHOD_TOOLS_CALL,
    MCP_METHOD_TOOLS_LIST,
    MCPMethod,
    scope_for_request,
)

__all__ = [
    "AliasResolver",
    "Builder",
    "Registry",
    # Errors
    "RegistryError",
    "ToolsetDoesNotExistError",
    "CapabilityNotFoundError",
    "ToolDoesNotExistError",
    "MisdeclaredCapabilityError",
    # Feature flags
    "FeatureChecker",
    "StaticFeatureChecker",
    "FileFeatureChecker",
    "HttpFeatureChecker",
    "CachedFeatureChecker",
    # Scoping
    "MCPMethod",
    "MCP_METHOD_INITIALIZE",
    "MCP_METHOD_TOOLS_LIST",
    "MCP_METHOD_TOOLS_CALL",
    "MCP_METHOD_RESOURCES_LIST",
    "MCP_METHOD_RESOURCES_READ",
    "MCP_METHOD_RESOURCES_TEMPLATES_LIST",
    "MCP_METHOD_PROMPTS_LIST",
    "MCP_METHOD_PROMPTS_GET",
    "scope_for_request",
]
