"""Toolset selection helpers for configuration and help output."""

from __future__ import annotations

from collections.abc import Iterable

from mcpcatalog.core.registry import Registry, ToolsetDoesNotExistError
from mcpcatalog.core.registry.names import (
    ALL_TOOLSETS,
    DEFAULT_TOOLSETS,
    clean_names,
    contains_toolset,
    expand_default_toolset,
    remove_toolset,
)

__all__ = [
    "ALL_TOOLSETS",
    "DEFAULT_TOOLSETS",
    "clean_names",
    "contains_toolset",
    "enable_toolsets",
    "expand_default_toolset",
    "generate_toolsets_help",
    "parse_toolsets_option",
    "remove_toolset",
]

_HELP_LINE_LENGTH = 70


def parse_toolsets_option(value: str | None) -> list[str] | None:
    """Split a comma-separated ``--toolsets`` value.

    Returns None when the option was not supplied so the registry falls back
    to default toolsets. An empty string selects no toolsets.
    """
    if value is None:
        return None
    return clean_names(value.split(","))


def enable_toolsets(
    registry: Registry,
    names: Iterable[str],
    *,
    error_on_unknown: bool = False,
) -> list[str]:
    """Check requested toolset ids against a registry's catalog.

    Args:
        registry: Registry whose catalog defines the known toolsets
        names: Requested toolset ids; ``all`` and ``default`` are always accepted
        error_on_unknown: Raise on the first unknown id instead of collecting it

    Returns:
        Unknown toolset ids in request order

    Raises:
        ToolsetDoesNotExistError: If ``error_on_unknown`` and an id is unknown
    """
    unknown: list[str] = []
    for name in clean_names(names):
        if name in (ALL_TOOLSETS, DEFAULT_TOOLSETS) or registry.has_toolset(name):
            continue
        if error_on_unknown:
            raise ToolsetDoesNotExistError(name)
        unknown.append(name)
    return unknown


def generate_toolsets_help(registry: Registry) -> str:
    """Render help text for the ``--toolsets`` option from a registry's catalog."""
    default_tools = ", ".join(registry.default_toolset_ids())

    lines: list[str] = []
    current = ""
    for toolset in registry.available_toolsets():
        if not current:
            current = toolset.id
        elif len(current) + len(toolset.id) + 2 <= _HELP_LINE_LENGTH:
            current += ", " + toolset.id
        else:
            lines.append(current)
            current = toolset.id
    if current:
        lines.append(current)
    available = ",\n\t     ".join(lines)

    return (
        "Comma-separated list of tool groups to enable (no spaces).\n"
        f"Available: {available}\n"
        "Special toolset keywords:\n"
        "  - all: Enables all available toolsets\n"
        f"  - default: Enables the default toolset configuration of:\n\t     {default_tools}\n"
        "Examples:\n"
        "  - --toolsets=actions,gists,notifications\n"
        "  - Default + additional: --toolsets=default,actions,gists\n"
        "  - All tools: --toolsets=all"
    )
