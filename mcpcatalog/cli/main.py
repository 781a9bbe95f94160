"""Main CLI entry point for mcpcatalog."""

from __future__ import annotations

import logging
import sys

import click

from mcpcatalog import __version__
from mcpcatalog.cli.commands_mcp import register_mcp_commands
from mcpcatalog.cli.options import filter_options, load_registry, resolve_config

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="mcpcatalog")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar="MCPCATALOG_CONFIG",
    help="Path to a server config YAML file",
)
@click.option(
    "--catalog",
    type=click.Path(dir_okay=False),
    envvar="MCPCATALOG_CATALOG",
    help="Path to the capability catalog YAML (overrides the config file)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str | None, catalog: str | None) -> None:
    """Serve and inspect a filtered catalog of MCP tools, resources and prompts."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    ctx.obj["catalog"] = catalog


@cli.command()
@filter_options
@click.option(
    "--help-text",
    is_flag=True,
    help="Print the generated help for the --toolsets option instead of a table",
)
@click.pass_context
def toolsets(ctx: click.Context, help_text: bool, **filters: object) -> None:
    """Show toolsets in the catalog and whether they are enabled.

    \b
    Examples:
      mcpcatalog --catalog catalog.yaml toolsets
      mcpcatalog --catalog catalog.yaml toolsets --toolsets default,actions
      mcpcatalog --catalog catalog.yaml toolsets --help-text
    """
    from mcpcatalog.cli.catalog import run_toolsets

    registry = load_registry(resolve_config(ctx, **filters))  # type: ignore[arg-type]
    run_toolsets(registry, help_text=help_text)


@cli.command()
@filter_options
@click.option("--all", "show_all", is_flag=True, help="List the whole catalog, ignoring filters")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a table")
@click.pass_context
def tools(ctx: click.Context, show_all: bool, as_json: bool, **filters: object) -> None:
    """List tools a client would see, sorted by toolset and name.

    \b
    Examples:
      mcpcatalog --catalog catalog.yaml tools
      mcpcatalog --catalog catalog.yaml tools --toolsets all --read-only
      mcpcatalog --catalog catalog.yaml tools --all --json
    """
    from mcpcatalog.cli.catalog import run_tools

    registry = load_registry(resolve_config(ctx, **filters))  # type: ignore[arg-type]
    run_tools(registry, show_all=show_all, as_json=as_json)


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def resolve(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Print canonical tool names, following deprecated aliases.

    \b
    Examples:
      mcpcatalog --catalog catalog.yaml resolve get_issue list_workflow_runs
    """
    from mcpcatalog.cli.catalog import run_resolve

    registry = load_registry(resolve_config(ctx))
    run_resolve(registry, names)


register_mcp_commands(cli=cli)


if __name__ == "__main__":
    cli()
