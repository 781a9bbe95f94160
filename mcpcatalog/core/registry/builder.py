"""Builder assembling a catalog and filter configuration into a Registry."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping

from mcpcatalog.core.registry.aliases import AliasResolver
from mcpcatalog.core.registry.errors import MisdeclaredCapabilityError
from mcpcatalog.core.registry.flags import FeatureChecker
from mcpcatalog.core.registry.names import (
    ALL_TOOLSETS,
    DEFAULT_TOOLSETS,
    RESERVED_TOOLSET_IDS,
    clean_names,
    expand_default_toolset,
)
from mcpcatalog.core.registry.registry import Registry, collect_toolsets
from mcpcatalog.models.capability import (
    ServerPrompt,
    ServerResourceTemplate,
    ServerTool,
    ToolsetMetadata,
)
from mcpcatalog.models.filters import FilterConfig

logger = logging.getLogger(__name__)


class Builder:
    """Mutable accumulator for a registry.

    Not thread safe: configure from a single thread, then call ``build``.

    Example:
        registry = (
            Builder()
            .set_tools(tools)
            .with_toolsets(["default", "actions"])
            .with_read_only(True)
            .build()
        )
    """

    def __init__(self) -> None:
        self._tools: list[ServerTool] = []
        self._resource_templates: list[ServerResourceTemplate] = []
        self._prompts: list[ServerPrompt] = []
        self._toolset_ids: list[str] | None = None
        self._read_only = False
        self._additional_tools: list[str] = []
        self._feature_checker: FeatureChecker | None = None
        self._aliases: dict[str, str] = {}

    # Catalog

    def set_tools(self, tools: Iterable[ServerTool]) -> Builder:
        """Replace the tool catalog."""
        self._tools = list(tools)
        return self

    def set_resource_templates(self, templates: Iterable[ServerResourceTemplate]) -> Builder:
        """Replace the resource template catalog."""
        self._resource_templates = list(templates)
        return self

    def set_prompts(self, prompts: Iterable[ServerPrompt]) -> Builder:
        """Replace the prompt catalog."""
        self._prompts = list(prompts)
        return self

    def add_read_tools(self, *tools: ServerTool) -> Builder:
        """Append tools that must carry the read-only hint.

        Raises:
            MisdeclaredCapabilityError: If any tool is not annotated read-only
        """
        for tool in tools:
            if not tool.read_only:
                raise MisdeclaredCapabilityError(tool.name, expected_read_only=True)
        self._tools.extend(tools)
        return self

    def add_write_tools(self, *tools: ServerTool) -> Builder:
        """Append mutating tools.

        Raises:
            MisdeclaredCapabilityError: If any tool is annotated read-only
        """
        for tool in tools:
            if tool.read_only:
                raise MisdeclaredCapabilityError(tool.name, expected_read_only=False)
        self._tools.extend(tools)
        return self

    # Filters

    def with_toolsets(self, names: Iterable[str] | None) -> Builder:
        """Select toolsets by id.

        Entries are trimmed, empty entries dropped and duplicates collapsed
        (first occurrence wins). ``None`` restores the default selection.
        ``"all"`` enables everything; ``"default"`` expands to the toolsets
        marked default in the catalog.
        """
        self._toolset_ids = None if names is None else clean_names(names)
        return self

    def with_read_only(self, read_only: bool) -> Builder:
        self._read_only = read_only
        return self

    def with_tools(self, names: Iterable[str]) -> Builder:
        """Add tools that bypass toolset filtering.

        Names are alias-resolved when the registry is built. Read-only mode
        and feature flags still apply to them.
        """
        self._additional_tools = clean_names(names)
        return self

    def with_feature_checker(self, checker: FeatureChecker | None) -> Builder:
        self._feature_checker = checker
        return self

    def with_deprecated_aliases(self, aliases: Mapping[str, str]) -> Builder:
        """Merge deprecated name aliases; later calls override earlier keys."""
        self._aliases.update(aliases)
        return self

    # Diagnostics

    def _toolset_metadata(self) -> dict[str, ToolsetMetadata]:
        return collect_toolsets(self._tools, self._resource_templates, self._prompts)

    def _known_toolset_ids(self) -> set[str]:
        return set(self._toolset_metadata())

    def _default_toolset_ids(self) -> list[str]:
        return sorted(
            toolset_id
            for toolset_id, meta in self._toolset_metadata().items()
            if meta.default
        )

    def unrecognized_toolsets(self) -> list[str]:
        """Return requested toolset ids missing from the catalog, in request order."""
        known = self._known_toolset_ids()
        return [
            toolset_id
            for toolset_id in self._toolset_ids or []
            if toolset_id not in RESERVED_TOOLSET_IDS and toolset_id not in known
        ]

    def _enabled_toolsets(self) -> frozenset[str] | None:
        if self._toolset_ids is None:
            return frozenset(self._default_toolset_ids())
        if ALL_TOOLSETS in self._toolset_ids:
            return None
        ids = self._toolset_ids
        if DEFAULT_TOOLSETS in ids:
            ids = expand_default_toolset(ids, self._default_toolset_ids())
        return frozenset(ids)

    def _warn_duplicate_names(self) -> None:
        for label, items in (
            ("tool", self._tools),
            ("resource template", self._resource_templates),
            ("prompt", self._prompts),
        ):
            counts = Counter(item.name for item in items)
            for name, count in sorted(counts.items()):
                if count > 1:
                    logger.warning("Duplicate %s name %s declared %d times", label, name, count)

    def build(self) -> Registry:
        """Create an immutable registry. Never fails."""
        aliases = AliasResolver(self._aliases)
        additional: list[str] = []
        if self._additional_tools:
            additional, _ = aliases.resolve(self._additional_tools)

        self._warn_duplicate_names()

        config = FilterConfig(
            enabled_toolsets=self._enabled_toolsets(),
            read_only=self._read_only,
            additional_tools=frozenset(additional),
            feature_checker=self._feature_checker,
        )
        return Registry(
            tools=self._tools,
            resource_templates=self._resource_templates,
            prompts=self._prompts,
            config=config,
            aliases=aliases,
            requested_toolsets=self._toolset_ids or (),
        )
