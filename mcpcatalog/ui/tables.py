"""Reusable Rich table formatters for registry listings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from mcpcatalog.core.registry import Registry
    from mcpcatalog.models.capability import ServerTool

_CHECK = "[success]✓[/success]"
_CROSS = "[muted]✗[/muted]"


def toolsets_table(registry: Registry) -> Table:
    """Build a table of every toolset with its default and enabled state."""
    table = Table(title="Toolsets", show_lines=False, pad_edge=False)
    table.add_column("Toolset", style="toolset")
    table.add_column("Default", justify="center")
    table.add_column("Enabled", justify="center")
    table.add_column("Tools", justify="right")
    table.add_column("Description")

    enabled = set(registry.enabled_toolset_ids())
    for toolset in registry.available_toolsets():
        table.add_row(
            toolset.id,
            _CHECK if toolset.default else _CROSS,
            _CHECK if toolset.id in enabled else _CROSS,
            str(len(registry.tools_for_toolset(toolset.id))),
            toolset.description,
        )
    return table


def tools_table(tools: list[ServerTool], *, title: str = "Tools") -> Table:
    """Build a table of tools in the order given."""
    table = Table(title=title, show_lines=False, pad_edge=False)
    table.add_column("Tool", style="bold")
    table.add_column("Toolset", style="toolset")
    table.add_column("Access")
    table.add_column("Flags", style="muted")

    for tool in tools:
        access = "[readonly]read[/readonly]" if tool.read_only else "[write]write[/write]"
        flags: list[str] = []
        if tool.feature_flag_enable:
            flags.append(f"+{tool.feature_flag_enable}")
        if tool.feature_flag_disable:
            flags.append(f"-{tool.feature_flag_disable}")
        table.add_row(tool.name, tool.toolset.id, access, " ".join(flags))
    return table
