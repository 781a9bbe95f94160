"""MCP server command implementation."""

from __future__ import annotations

import click

from mcpcatalog.cli.options import load_registry
from mcpcatalog.utils.config import ServerConfig
from mcpcatalog.utils.deps import require_mcp_dependency


def run_mcp_serve(config: ServerConfig, *, server_name: str, verbose: bool) -> None:
    """Run the MCP server command.

    Args:
        config: Resolved server configuration
        server_name: Name advertised to MCP clients
        verbose: Print the effective configuration to stderr
    """
    require_mcp_dependency()

    registry = load_registry(config)

    if verbose:
        click.echo("Starting mcpcatalog MCP server...", err=True)
        click.echo(f"  Catalog: {config.catalog}", err=True)
        click.echo(
            f"  Enabled toolsets: {', '.join(registry.enabled_toolset_ids()) or 'none'}",
            err=True,
        )
        if config.tools:
            click.echo(f"  Additional tools: {', '.join(config.tools)}", err=True)
        if config.read_only:
            click.echo("  Mode: READ ONLY", err=True)
        flags = config.feature_flags
        if flags.url:
            click.echo(f"  Feature flags: {flags.url}", err=True)
        elif flags.file:
            click.echo(f"  Feature flags: {flags.file}", err=True)
        elif flags.enabled:
            click.echo(f"  Feature flags: {', '.join(flags.enabled)}", err=True)

    # Import here to avoid loading MCP dependencies unless needed
    from mcpcatalog.mcp.server import run_mcp_server

    run_mcp_server(registry, name=server_name)
