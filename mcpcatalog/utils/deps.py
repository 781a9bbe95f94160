"""Optional dependency checks for the MCP server path."""

from __future__ import annotations

import importlib.metadata
import importlib.util
import sys

import click

MIN_MCP_VERSION = (1, 10)
MCP_MISSING_ERROR = 'Error: mcp not installed. Install with: pip install "mcpcatalog[mcp]"'
MCP_TOO_OLD_ERROR = (
    "Error: mcp {found} is too old; tool annotations need mcp>={minimum}. "
    'Upgrade with: pip install -U "mcpcatalog[mcp]"'
)


def installed_mcp_version() -> tuple[int, ...] | None:
    """Return the installed `mcp` version as an int tuple, or None if absent."""
    try:
        if importlib.util.find_spec("mcp") is None:
            return None
        raw = importlib.metadata.version("mcp")
    except (ImportError, ValueError, importlib.metadata.PackageNotFoundError):
        return None

    parts: list[int] = []
    for piece in raw.split(".")[:3]:
        digits = "".join(ch for ch in piece if ch.isdigit())
        if not digits:
            break
        parts.append(int(digits))
    return tuple(parts)


def require_mcp_dependency() -> None:
    """Exit with a single actionable line when `mcp` is missing or too old."""
    version = installed_mcp_version()
    if version is None:
        click.echo(MCP_MISSING_ERROR, err=True)
        sys.exit(1)
    if version and version < MIN_MCP_VERSION:
        click.echo(
            MCP_TOO_OLD_ERROR.format(
                found=".".join(str(p) for p in version),
                minimum=".".join(str(p) for p in MIN_MCP_VERSION),
            ),
            err=True,
        )
        sys.exit(1)
