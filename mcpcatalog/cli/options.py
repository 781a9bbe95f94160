"""Filter options shared by every registry-backed command."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

from mcpcatalog.core.registry import Registry, RegistryError, ToolsetDoesNotExistError
from mcpcatalog.core.toolsets import clean_names, enable_toolsets, parse_toolsets_option
from mcpcatalog.ui.console import err_console
from mcpcatalog.utils.config import ServerConfig, build_registry, load_config

F = TypeVar("F", bound=Callable[..., Any])

_FILTER_OPTIONS = [
    click.option(
        "--toolsets",
        envvar="MCPCATALOG_TOOLSETS",
        help="Comma-separated toolsets to enable; 'all' and 'default' are keywords",
    ),
    click.option(
        "--tools",
        envvar="MCPCATALOG_TOOLS",
        help="Comma-separated tool names to enable regardless of toolset",
    ),
    click.option(
        "--read-only/--no-read-only",
        "read_only",
        default=None,
        envvar="MCPCATALOG_READ_ONLY",
        help="Hide every tool not annotated read-only",
    ),
    click.option(
        "--flags-file",
        type=click.Path(dir_okay=False),
        help="YAML file mapping feature flag names to booleans (re-read on each check)",
    ),
    click.option(
        "--flags-url",
        help="Base URL of a feature flag service (GET <url>/flags/<name>)",
    ),
    click.option(
        "--enable-flag",
        "enable_flags",
        multiple=True,
        help="Feature flag to treat as on (repeatable)",
    ),
    click.option(
        "--strict-toolsets",
        is_flag=True,
        help="Fail instead of warning when a requested toolset does not exist",
    ),
]


def filter_options(func: F) -> F:
    """Attach the common filter options to a command."""
    for option in reversed(_FILTER_OPTIONS):
        func = option(func)
    return func


def resolve_config(
    ctx: click.Context,
    *,
    toolsets: str | None = None,
    tools: str | None = None,
    read_only: bool | None = None,
    flags_file: str | None = None,
    flags_url: str | None = None,
    enable_flags: tuple[str, ...] = (),
    strict_toolsets: bool = False,
) -> ServerConfig:
    """Merge the config file named on the group with command-line overrides."""
    config_path = ctx.obj.get("config_path")
    if config_path:
        try:
            config = load_config(config_path)
        except (FileNotFoundError, ValueError) as err:
            raise click.ClickException(str(err)) from err
    else:
        config = ServerConfig()

    updates: dict[str, Any] = {}
    if ctx.obj.get("catalog"):
        updates["catalog"] = ctx.obj["catalog"]
    if toolsets is not None:
        updates["toolsets"] = parse_toolsets_option(toolsets)
    if tools is not None:
        updates["tools"] = clean_names(tools.split(","))
    if read_only is not None:
        updates["read_only"] = read_only
    if strict_toolsets:
        updates["strict_toolsets"] = True

    flag_updates: dict[str, Any] = {}
    if flags_url:
        flag_updates["url"] = flags_url
    if flags_file:
        flag_updates["file"] = flags_file
    if enable_flags:
        flag_updates["enabled"] = clean_names(enable_flags)
    if flag_updates:
        updates["feature_flags"] = config.feature_flags.model_copy(update=flag_updates)

    return config.model_copy(update=updates) if updates else config


def load_registry(config: ServerConfig) -> Registry:
    """Build the registry for ``config``, reporting unknown toolsets.

    Raises:
        click.ClickException: On catalog errors, or unknown toolsets in strict mode
    """
    try:
        registry = build_registry(config)
    except (FileNotFoundError, ValueError, RegistryError) as err:
        raise click.ClickException(str(err)) from err

    if config.strict_toolsets:
        try:
            enable_toolsets(registry, registry.requested_toolsets, error_on_unknown=True)
        except ToolsetDoesNotExistError as err:
            raise click.ClickException(str(err)) from err
        return registry

    unknown = registry.unrecognized_toolsets()
    if unknown:
        err_console.print(
            f"[warning]Warning:[/warning] unrecognized toolsets ignored: {', '.join(unknown)}"
        )
    return registry
