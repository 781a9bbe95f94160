"""Catalog inspection command implementations."""

from __future__ import annotations

import json

import click

from mcpcatalog.core.registry import Registry
from mcpcatalog.core.toolsets import generate_toolsets_help
from mcpcatalog.ui.console import err_console, out_console
from mcpcatalog.ui.tables import tools_table, toolsets_table


def run_toolsets(registry: Registry, *, help_text: bool) -> None:
    """Show toolsets, or the generated ``--toolsets`` help text."""
    if help_text:
        click.echo(generate_toolsets_help(registry))
        return
    out_console.print(toolsets_table(registry))


def run_tools(registry: Registry, *, show_all: bool, as_json: bool) -> None:
    """List tools visible under the current filters, or the whole catalog."""
    if show_all:
        tools = sorted(registry.all_tools(), key=lambda t: t.sort_key())
    else:
        tools = registry.available_tools()

    if as_json:
        payload = [
            {
                "name": tool.name,
                "toolset": tool.toolset.id,
                "read_only": tool.read_only,
                "description": tool.description,
            }
            for tool in tools
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    if not tools:
        err_console.print("[muted]No tools match the current filters.[/muted]")
        return
    out_console.print(tools_table(tools, title="All tools" if show_all else "Available tools"))


def run_resolve(registry: Registry, names: tuple[str, ...]) -> None:
    """Print the canonical name for each input name, one per line."""
    resolved, _ = registry.resolve_tool_aliases(names)
    known = {tool.name for tool in registry.all_tools()}
    for original, canonical in zip(names, resolved, strict=True):
        if original != canonical:
            click.echo(f"{original} -> {canonical}")
        else:
            click.echo(canonical)
        if canonical not in known:
            err_console.print(f"[warning]Warning:[/warning] tool {canonical} is not in the catalog")
