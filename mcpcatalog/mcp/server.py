"""MCP server exposing a capability registry."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import mcp.server.stdio
from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions

from mcpcatalog import __version__
from mcpcatalog.core.registry import (
    MCP_METHOD_PROMPTS_GET,
    MCP_METHOD_PROMPTS_LIST,
    MCP_METHOD_RESOURCES_READ,
    MCP_METHOD_RESOURCES_TEMPLATES_LIST,
    MCP_METHOD_TOOLS_CALL,
    MCP_METHOD_TOOLS_LIST,
    Registry,
)
from mcpcatalog.models.capability import ServerPrompt

logger = logging.getLogger(__name__)
C = TypeVar("C")

_CONTENT_TYPES = (
    types.TextContent,
    types.ImageContent,
    types.AudioContent,
    types.EmbeddedResource,
    types.ResourceLink,
)


class CatalogMCPServer:
    """MCP server that answers every request from a method-scoped registry view.

    The registry is consulted on each request, so feature flags are
    re-evaluated per call. Hidden or unknown capabilities behave exactly like
    names that were never declared.
    """

    def __init__(self, registry: Registry, name: str = "mcpcatalog") -> None:
        self.registry = registry
        self.name = name
        self.server = Server(name)
        self._register_handlers()

        logger.info(
            "Initialized %s MCP server with %s tools, %s resource templates, %s prompts "
            "(enabled toolsets: %s)",
            name,
            len(registry.all_tools()),
            len(registry.all_resource_templates()),
            len(registry.all_prompts()),
            ", ".join(registry.enabled_toolset_ids()) or "none",
        )

    def _request_context(self) -> Any:
        """Return the active request context, or None outside a request."""
        try:
            return self.server.request_context
        except LookupError:
            return None

    async def _query(self, available: Callable[[Any], list[C]]) -> list[C]:
        """Run a registry query in a worker thread.

        Feature checkers may block on I/O, so filtering never runs on the
        event loop.
        """
        return await asyncio.to_thread(available, self._request_context())

    def _register_handlers(self) -> None:
        @self.server.list_tools()  # type: ignore
        async def handle_list_tools() -> list[types.Tool]:
            scoped = self.registry.for_mcp_request(MCP_METHOD_TOOLS_LIST)
            return [tool.to_mcp() for tool in await self._query(scoped.available_tools)]

        @self.server.call_tool()  # type: ignore
        async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> Any:
            scoped = self.registry.for_mcp_request(MCP_METHOD_TOOLS_CALL, name)
            tools = await self._query(scoped.available_tools)
            if not tools:
                logger.info("Rejected call to unknown or hidden tool %s", name)
                raise ValueError(f"Unknown tool: {name}")

            tool = tools[0]
            result = await _invoke(tool.get_handler(), arguments or {})
            return _to_content(result)

        @self.server.list_resources()  # type: ignore
        async def handle_list_resources() -> list[types.Resource]:
            # Only templates are declared; concrete resources come from reads.
            return []

        @self.server.list_resource_templates()  # type: ignore
        async def handle_list_resource_templates() -> list[types.ResourceTemplate]:
            scoped = self.registry.for_mcp_request(MCP_METHOD_RESOURCES_TEMPLATES_LIST)
            return [
                template.to_mcp()
                for template in await self._query(scoped.available_resource_templates)
            ]

        @self.server.read_resource()  # type: ignore
        async def handle_read_resource(uri: Any) -> list[ReadResourceContents]:
            uri_str = str(uri)
            scoped = self.registry.for_mcp_request(MCP_METHOD_RESOURCES_READ, uri_str)
            templates = await self._query(scoped.available_resource_templates)
            if not templates:
                raise ValueError(f"Unknown resource: {uri_str}")

            template = max(templates, key=lambda t: t.match_specificity(uri_str))
            result = await _invoke(template.get_handler(), {"uri": uri_str})
            if not isinstance(result, str | bytes):
                result = json.dumps(result)
            return [ReadResourceContents(content=result, mime_type=template.mime_type)]

        @self.server.list_prompts()  # type: ignore
        async def handle_list_prompts() -> list[types.Prompt]:
            scoped = self.registry.for_mcp_request(MCP_METHOD_PROMPTS_LIST)
            return [prompt.to_mcp() for prompt in await self._query(scoped.available_prompts)]

        @self.server.get_prompt()  # type: ignore
        async def handle_get_prompt(
            name: str,
            arguments: dict[str, str] | None,
        ) -> types.GetPromptResult:
            scoped = self.registry.for_mcp_request(MCP_METHOD_PROMPTS_GET, name)
            prompts = await self._query(scoped.available_prompts)
            if not prompts:
                raise ValueError(f"Unknown prompt: {name}")

            prompt = prompts[0]
            arguments = arguments or {}
            missing = [a.name for a in prompt.arguments if a.required and a.name not in arguments]
            if missing:
                raise ValueError(
                    f"Missing required arguments for prompt {name}: {', '.join(missing)}"
                )
            result = await _invoke(prompt.get_handler(), arguments)
            return _to_prompt_result(prompt, result)

    async def run_stdio(self) -> None:
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=self.name,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )

    async def close(self) -> None:
        """Release resources held by the feature checker, if any."""
        close = getattr(self.registry.config.feature_checker, "close", None)
        if callable(close):
            close()


async def _invoke(handler: Callable[..., Any], arguments: dict[str, Any]) -> Any:
    """Call a capability handler with keyword arguments.

    Coroutine functions are awaited; plain callables run in a worker thread
    so they cannot stall the event loop.
    """
    if inspect.iscoroutinefunction(handler):
        return await handler(**arguments)
    result = await asyncio.to_thread(handler, **arguments)
    if inspect.isawaitable(result):
        return await result
    return result


def _to_content(result: Any) -> list[Any]:
    """Convert a tool handler's return value into MCP content blocks."""
    if result is None:
        return []
    if isinstance(result, _CONTENT_TYPES):
        return [result]
    if isinstance(result, list | tuple) and result and all(
        isinstance(item, _CONTENT_TYPES) for item in result
    ):
        return list(result)
    if isinstance(result, str):
        text = result
    elif isinstance(result, dict | list | tuple):
        text = json.dumps(result)
    else:
        text = str(result)
    return [types.TextContent(type="text", text=text)]


def _to_prompt_result(prompt: ServerPrompt, result: Any) -> types.GetPromptResult:
    if isinstance(result, types.GetPromptResult):
        return result
    if isinstance(result, types.PromptMessage):
        messages = [result]
    elif isinstance(result, list | tuple) and all(
        isinstance(item, types.PromptMessage) for item in result
    ):
        messages = list(result)
    else:
        messages = [
            types.PromptMessage(
                role="user",
                content=types.TextContent(type="text", text=str(result)),
            )
        ]
    return types.GetPromptResult(description=prompt.description or None, messages=messages)


def run_mcp_server(registry: Registry, name: str = "mcpcatalog") -> None:
    """Run the catalog MCP server on stdio until the client disconnects."""
    server = CatalogMCPServer(registry, name=name)

    async def main() -> None:
        try:
            await server.run_stdio()
        finally:
            await server.close()

    asyncio.run(main())
