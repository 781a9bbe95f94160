"""Per-request registry scoping by MCP method."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcpcatalog.core.registry.registry import Registry

MCP_METHOD_INITIALIZE = "initialize"
MCP_METHOD_TOOLS_LIST = "tools/list"
MCP_METHOD_TOOLS_CALL = "tools/call"
MCP_METHOD_RESOURCES_LIST = "resources/list"
MCP_METHOD_RESOURCES_READ = "resources/read"
MCP_METHOD_RESOURCES_TEMPLATES_LIST = "resources/templates/list"
MCP_METHOD_PROMPTS_LIST = "prompts/list"
MCP_METHOD_PROMPTS_GET = "prompts/get"


class MCPMethod(StrEnum):
    """MCP methods the registry knows how to scope."""

    INITIALIZE = MCP_METHOD_INITIALIZE
    TOOLS_LIST = MCP_METHOD_TOOLS_LIST
    TOOLS_CALL = MCP_METHOD_TOOLS_CALL
    RESOURCES_LIST = MCP_METHOD_RESOURCES_LIST
    RESOURCES_READ = MCP_METHOD_RESOURCES_READ
    RESOURCES_TEMPLATES_LIST = MCP_METHOD_RESOURCES_TEMPLATES_LIST
    PROMPTS_LIST = MCP_METHOD_PROMPTS_LIST
    PROMPTS_GET = MCP_METHOD_PROMPTS_GET


_NOTHING = {"include_tools": False, "include_resources": False, "include_prompts": False}
_ONLY_TOOLS = {**_NOTHING, "include_tools": True}
_ONLY_RESOURCES = {**_NOTHING, "include_resources": True}
_ONLY_PROMPTS = {**_NOTHING, "include_prompts": True}


def scope_for_request(registry: Registry, method: str, item_name: str = "") -> Registry:
    """Narrow ``registry`` to the capabilities relevant for one request.

    Narrowing composes with the regular pipeline: toolset, read-only and
    feature-flag filters still apply to whatever remains. ``initialize`` and
    unknown methods get an empty scope since capabilities are advertised
    through server options, not the registry.

    Args:
        registry: Registry to scope; left untouched
        method: MCP method name, e.g. ``tools/call``
        item_name: Tool name, URI template or prompt name, depending on method

    Returns:
        A new registry sharing the catalog of ``registry``
    """
    if method == MCP_METHOD_TOOLS_LIST:
        return registry.derive(**_ONLY_TOOLS)

    if method == MCP_METHOD_TOOLS_CALL:
        if not item_name:
            return registry.derive(**_ONLY_TOOLS)
        canonical = registry.aliases.resolve_one(item_name)
        return registry.derive(**_ONLY_TOOLS, tool_name=canonical)

    if method in (MCP_METHOD_RESOURCES_LIST, MCP_METHOD_RESOURCES_TEMPLATES_LIST):
        return registry.derive(**_ONLY_RESOURCES)

    if method == MCP_METHOD_RESOURCES_READ:
        if not item_name:
            return registry.derive(**_ONLY_RESOURCES)
        return registry.derive(**_ONLY_RESOURCES, resource_uri=item_name)

    if method == MCP_METHOD_PROMPTS_LIST:
        return registry.derive(**_ONLY_PROMPTS)

    if method == MCP_METHOD_PROMPTS_GET:
        if not item_name:
            return registry.derive(**_ONLY_PROMPTS)
        return registry.derive(**_ONLY_PROMPTS, prompt_name=item_name)

    # initialize and anything unrecognised
    return registry.derive(**_NOTHING)
