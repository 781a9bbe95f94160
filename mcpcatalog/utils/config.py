"""Server configuration file loading and registry assembly."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from mcpcatalog.core.catalog import load_catalog
from mcpcatalog.core.registry import (
    Builder,
    CachedFeatureChecker,
    FeatureChecker,
    FileFeatureChecker,
    HttpFeatureChecker,
    Registry,
    StaticFeatureChecker,
)

logger = logging.getLogger(__name__)


class FeatureFlagsConfig(BaseModel):
    """Where feature flag values come from.

    Sources are exclusive; the first configured of ``url``, ``file`` and
    ``enabled`` wins. Remote and file lookups are cached for
    ``cache_ttl_seconds`` when it is positive.
    """

    enabled: list[str] = Field(default_factory=list)
    file: str | None = None
    url: str | None = None
    cache_ttl_seconds: float = 0.0

    def is_configured(self) -> bool:
        return bool(self.url or self.file or self.enabled)


class ServerConfig(BaseModel):
    """Settings for building a registry, from file plus CLI overrides."""

    catalog: str | None = None
    # None selects the catalog's default toolsets
    toolsets: list[str] | None = None
    tools: list[str] = Field(default_factory=list)
    read_only: bool = False
    deprecated_aliases: dict[str, str] = Field(default_factory=dict)
    feature_flags: FeatureFlagsConfig = Field(default_factory=FeatureFlagsConfig)
    strict_toolsets: bool = False

    @field_validator("toolsets", "tools", mode="before")
    @classmethod
    def _split_comma_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.split(",")
        return value


def load_config(path: str | Path) -> ServerConfig:
    """Load a server configuration YAML file.

    Relative ``catalog`` and flag file paths are resolved against the
    config file's directory.

    Args:
        path: Path to the configuration file

    Returns:
        Parsed ServerConfig

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML mapping at: {path}")

    try:
        config = ServerConfig.model_validate(data)
    except ValidationError as err:
        raise ValueError(f"Invalid config {path}: {err}") from err

    base = path.parent
    updates: dict[str, Any] = {}
    if config.catalog and not Path(config.catalog).is_absolute():
        updates["catalog"] = str(base / config.catalog)
    flags = config.feature_flags
    if flags.file and not Path(flags.file).is_absolute():
        updates["feature_flags"] = flags.model_copy(update={"file": str(base / flags.file)})
    return config.model_copy(update=updates) if updates else config


def build_feature_checker(flags: FeatureFlagsConfig) -> FeatureChecker | None:
    """Create the feature checker described by ``flags``, or None if unset."""
    checker: FeatureChecker
    if flags.url:
        checker = HttpFeatureChecker(flags.url)
    elif flags.file:
        checker = FileFeatureChecker(flags.file)
    elif flags.enabled:
        return StaticFeatureChecker(flags.enabled)
    else:
        return None

    if flags.cache_ttl_seconds > 0:
        return CachedFeatureChecker(checker, ttl_seconds=flags.cache_ttl_seconds)
    return checker


def build_registry(config: ServerConfig, *, catalog_path: str | Path | None = None) -> Registry:
    """Load the catalog and assemble a registry according to ``config``.

    Aliases from the config file are layered over the catalog's own.

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        ValueError: If no catalog is configured or the catalog is invalid
        MisdeclaredCapabilityError: If the catalog misdeclares a tool
    """
    path = catalog_path or config.catalog
    if not path:
        raise ValueError("No catalog configured. Pass --catalog or set 'catalog' in the config file")

    builder = load_catalog(path).apply(Builder())
    builder.with_deprecated_aliases(config.deprecated_aliases)
    builder.with_toolsets(config.toolsets)
    builder.with_tools(config.tools)
    builder.with_read_only(config.read_only)
    builder.with_feature_checker(build_feature_checker(config.feature_flags))

    registry = builder.build()
    for old, new in registry.aliases.chained_aliases().items():
        logger.warning(
            'alias "%s" points at "%s", which is itself deprecated; only one hop is resolved',
            old,
            new,
        )
    return registry
