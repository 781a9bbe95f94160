"""MCP serve command registration for the top-level CLI."""

from __future__ import annotations

import click

from mcpcatalog.cli.options import filter_options, resolve_config


def register_mcp_commands(*, cli: click.Group) -> None:
    """Register the serve command on the provided CLI group."""

    @cli.command()
    @filter_options
    @click.option(
        "--name",
        "server_name",
        default="mcpcatalog",
        show_default=True,
        help="Server name advertised to MCP clients",
    )
    @click.pass_context
    def serve(
        ctx: click.Context,
        server_name: str,
        **filters: object,
    ) -> None:
        """Start the MCP server on stdio transport.

        Every request is answered from a view of the catalog scoped to the
        request's method, so hidden tools cannot be listed or called.

        \b
        Examples:
          # Default toolsets from a catalog
          mcpcatalog --catalog catalog.yaml serve

          # Specific toolsets, read-only
          mcpcatalog --catalog catalog.yaml serve --toolsets repos,issues --read-only

          # Default toolsets plus one extra tool
          mcpcatalog --catalog catalog.yaml serve --tools create_gist

        \b
        Claude Desktop configuration (~/.claude/claude_desktop_config.json):
          {
            "mcpServers": {
              "catalog": {
                "command": "mcpcatalog",
                "args": ["--catalog", "/path/to/catalog.yaml", "serve"]
              }
            }
          }
        """
        from mcpcatalog.cli.mcp import run_mcp_serve

        config = resolve_config(ctx, **filters)  # type: ignore[arg-type]
        run_mcp_serve(
            config,
            server_name=server_name,
            verbose=ctx.obj.get("verbose", False),
        )
