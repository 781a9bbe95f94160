"""Capability declaration models: toolsets, tools, resource templates and prompts."""

from __future__ import annotations

import importlib
import re
from collections.abc import Callable
from enum import StrEnum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_TEMPLATE_VAR_RE = re.compile(r"\{(\+?)[^}]+\}")


class CapabilityKind(StrEnum):
    """Kinds of capabilities exposed by the registry."""

    TOOL = "tool"
    RESOURCE_TEMPLATE = "resource_template"
    PROMPT = "prompt"


class ToolsetMetadata(BaseModel):
    """Describes a named, independently enable-able group of capabilities."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str = ""
    default: bool = False  # Enabled when no toolsets are requested
    icon: str | None = None  # Octicon name, rendered by the client layer


class HandlerMissingError(Exception):
    """Raised when a capability without a handler is invoked."""

    def __init__(self, name: str) -> None:
        super().__init__(f"capability {name} has no handler")
        self.name = name


@lru_cache(maxsize=256)
def import_handler(path: str) -> Callable[..., Any]:
    """Import a handler from a ``package.module:attribute`` reference."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Invalid handler reference '{path}'. Expected 'module:attribute'")
    module = importlib.import_module(module_name)
    target: Any = module
    for part in attr.split("."):
        target = getattr(target, part)
    if not callable(target):
        raise ValueError(f"Handler reference '{path}' is not callable")
    return target


class _Capability(BaseModel):
    """Fields shared by every capability kind."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    toolset: ToolsetMetadata
    feature_flag_enable: str | None = None
    feature_flag_disable: str | None = None
    handler: Callable[..., Any] | str | None = None

    @property
    def toolset_id(self) -> str:
        return self.toolset.id

    def has_handler(self) -> bool:
        return self.handler is not None

    def get_handler(self) -> Callable[..., Any]:
        """Return the callable backing this capability.

        Raises:
            HandlerMissingError: If no handler was declared
        """
        if self.handler is None:
            raise HandlerMissingError(self.name)
        if isinstance(self.handler, str):
            return import_handler(self.handler)
        return self.handler

    def sort_key(self) -> tuple[str, str]:
        return (self.toolset.id, self.name)


class ServerTool(_Capability):
    """A tool declaration.

    ``read_only`` is the read-only hint advertised to clients. It is fixed at
    declaration time and decides whether the tool survives read-only mode.
    """

    read_only: bool = False
    title: str | None = None
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def is_read_only(self) -> bool:
        return self.read_only

    def to_mcp(self) -> Any:
        """Convert to an ``mcp.types.Tool`` for protocol responses."""
        from mcp import types

        return types.Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.input_schema,
            annotations=types.ToolAnnotations(
                title=self.title,
                readOnlyHint=self.read_only,
            ),
        )


class ServerResourceTemplate(_Capability):
    """A resource template declaration."""

    uri_template: str
    mime_type: str | None = None

    def matches_uri(self, uri: str) -> bool:
        """Check whether ``uri`` is this template or a concrete expansion of it.

        Supports level-1 RFC 6570 variables (``{owner}``) which match a single
        path segment, and reserved expansion (``{+path}``) which spans segments.
        """
        if uri == self.uri_template:
            return True
        return _template_pattern(self.uri_template).fullmatch(uri) is not None

    def match_specificity(self, uri: str) -> tuple[bool, int, int]:
        """Rank this template for ``uri`` when several templates match it.

        Higher sorts first: the template string itself, then fewer reserved
        (``{+var}``) expansions, then more literal characters. Remaining ties
        go to the earlier template in registry order.
        """
        variables = _TEMPLATE_VAR_RE.findall(self.uri_template)
        reserved = sum(1 for prefix in variables if prefix)
        literal = len(_TEMPLATE_VAR_RE.sub("", self.uri_template))
        return (uri == self.uri_template, -reserved, literal)

    def to_mcp(self) -> Any:
        from mcp import types

        return types.ResourceTemplate(
            name=self.name,
            uriTemplate=self.uri_template,
            description=self.description or None,
            mimeType=self.mime_type,
        )


class PromptArgument(BaseModel):
    """An argument accepted by a prompt."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    required: bool = False


class ServerPrompt(_Capability):
    """A prompt declaration."""

    arguments: tuple[PromptArgument, ...] = ()

    def to_mcp(self) -> Any:
        from mcp import types

        return types.Prompt(
            name=self.name,
            description=self.description or None,
            arguments=[
                types.PromptArgument(
                    name=arg.name,
                    description=arg.description,
                    required=arg.required,
                )
                for arg in self.arguments
            ],
        )


@lru_cache(maxsize=512)
def _template_pattern(uri_template: str) -> re.Pattern[str]:
    parts: list[str] = []
    last = 0
    for match in _TEMPLATE_VAR_RE.finditer(uri_template):
        parts.append(re.escape(uri_template[last : match.start()]))
        parts.append(".+" if match.group(1) else "[^/]+")
        last = match.end()
    parts.append(re.escape(uri_template[last:]))
    return re.compile("".join(parts))
