"""Shared Rich consoles and style definitions."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

CATALOG_THEME = Theme(
    {
        "info": "cyan",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "heading": "bold cyan",
        "muted": "dim",
        "toolset": "magenta",
        "readonly": "green",
        "write": "yellow",
    }
)

err_console = Console(stderr=True, theme=CATALOG_THEME)
out_console = Console(theme=CATALOG_THEME)
