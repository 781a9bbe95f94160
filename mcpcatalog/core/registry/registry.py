"""Immutable capability registry and its filter pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from mcpcatalog.core.registry.aliases import AliasResolver
from mcpcatalog.core.registry.errors import (
    CapabilityNotFoundError,
    ToolDoesNotExistError,
    ToolsetDoesNotExistError,
)
from mcpcatalog.core.registry.names import RESERVED_TOOLSET_IDS
from mcpcatalog.core.registry.scoping import scope_for_request
from mcpcatalog.models.capability import (
    CapabilityKind,
    ServerPrompt,
    ServerResourceTemplate,
    ServerTool,
    ToolsetMetadata,
)
from mcpcatalog.models.filters import FilterConfig

logger = logging.getLogger(__name__)
C = TypeVar("C", ServerTool, ServerResourceTemplate, ServerPrompt)


def collect_toolsets(
    *groups: Iterable[ServerTool | ServerResourceTemplate | ServerPrompt],
) -> dict[str, ToolsetMetadata]:
    """Map each toolset id to the metadata of the first capability declaring it.

    Tools are scanned first, then resource templates, then prompts. Later
    capabilities with conflicting metadata for the same id are ignored.
    """
    found: dict[str, ToolsetMetadata] = {}
    for group in groups:
        for item in group:
            found.setdefault(item.toolset.id, item.toolset)
    return found


class Registry:
    """Catalog of capabilities plus the filter configuration applied to it.

    A registry never changes after construction. Every ``available_*`` call
    re-runs the full pipeline, so concurrent readers need no locking. The
    only blocking work is the injected feature checker.

    Pipeline, in order:
        1. toolset enabled, or tool name in the additive allow-list
        2. read-only mode drops mutating tools
        3. feature flags (enable fails closed, disable fails open)

    Request narrowing (a single tool, URI or prompt) is applied before step 1.
    Only the first surviving capability per name is kept, and survivors are
    sorted by (toolset id, name).
    """

    def __init__(
        self,
        *,
        tools: Iterable[ServerTool] = (),
        resource_templates: Iterable[ServerResourceTemplate] = (),
        prompts: Iterable[ServerPrompt] = (),
        config: FilterConfig | None = None,
        aliases: AliasResolver | None = None,
        requested_toolsets: Sequence[str] = (),
    ) -> None:
        self._tools = tuple(tools)
        self._resource_templates = tuple(resource_templates)
        self._prompts = tuple(prompts)
        self._config = config or FilterConfig()
        self._aliases = aliases or AliasResolver()
        self._requested_toolsets = tuple(requested_toolsets)

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def aliases(self) -> AliasResolver:
        return self._aliases

    def derive(self, **config_updates: Any) -> Registry:
        """Return a registry sharing this catalog with an updated filter config."""
        return Registry(
            tools=self._tools,
            resource_templates=self._resource_templates,
            prompts=self._prompts,
            config=self._config.model_copy(update=config_updates),
            aliases=self._aliases,
            requested_toolsets=self._requested_toolsets,
        )

    # ------------------------------------------------------------------
    # Filtered views
    # ------------------------------------------------------------------

    def available_tools(self, ctx: Any = None) -> list[ServerTool]:
        """Return tools visible under the current filter configuration."""
        cfg = self._config
        if not cfg.include_tools:
            return []
        return self._run_pipeline(
            ctx,
            self._tools,
            narrow=(lambda t: t.name == cfg.tool_name) if cfg.tool_name is not None else None,
            allow_listed=lambda t: t.name in cfg.additional_tools,
            read_only_blocked=lambda t: cfg.read_only and not t.read_only,
        )

    def available_resource_templates(self, ctx: Any = None) -> list[ServerResourceTemplate]:
        """Return resource templates visible under the current filter configuration."""
        cfg = self._config
        if not cfg.include_resources:
            return []
        uri = cfg.resource_uri
        return self._run_pipeline(
            ctx,
            self._resource_templates,
            narrow=(lambda r: r.matches_uri(uri)) if uri is not None else None,
        )

    def available_prompts(self, ctx: Any = None) -> list[ServerPrompt]:
        """Return prompts visible under the current filter configuration."""
        cfg = self._config
        if not cfg.include_prompts:
            return []
        return self._run_pipeline(
            ctx,
            self._prompts,
            narrow=(lambda p: p.name == cfg.prompt_name) if cfg.prompt_name is not None else None,
        )

    def _run_pipeline(
        self,
        ctx: Any,
        items: Sequence[C],
        *,
        narrow: Callable[[C], bool] | None = None,
        allow_listed: Callable[[C], bool] | None = None,
        read_only_blocked: Callable[[C], bool] | None = None,
    ) -> list[C]:
        seen: set[str] = set()
        result: list[C] = []
        for item in items:
            if item.name in seen:
                continue
            if narrow is not None and not narrow(item):
                continue
            listed = allow_listed(item) if allow_listed is not None else False
            if not (listed or self.is_toolset_enabled(item.toolset.id)):
                continue
            if read_only_blocked is not None and read_only_blocked(item):
                continue
            if not self._passes_feature_flags(ctx, item):
                continue
            seen.add(item.name)
            result.append(item)
        result.sort(key=lambda c: c.sort_key())
        return result

    def _passes_feature_flags(self, ctx: Any, item: C) -> bool:
        if item.feature_flag_enable and not self._check_flag(ctx, item.feature_flag_enable):
            return False
        if item.feature_flag_disable and self._check_flag(ctx, item.feature_flag_disable):
            return False
        return True

    def _check_flag(self, ctx: Any, flag_name: str) -> bool:
        checker = self._config.feature_checker
        if checker is None:
            return False
        try:
            return bool(checker(ctx, flag_name))
        except Exception:
            logger.warning(
                "Feature flag check failed for %s; treating as off", flag_name, exc_info=True
            )
            return False

    # ------------------------------------------------------------------
    # Unfiltered views
    # ------------------------------------------------------------------

    def all_tools(self) -> list[ServerTool]:
        """Return every declared tool, ignoring filters (for help text and introspection)."""
        return list(self._tools)

    def all_resource_templates(self) -> list[ServerResourceTemplate]:
        return list(self._resource_templates)

    def all_prompts(self) -> list[ServerPrompt]:
        return list(self._prompts)

    def find_tool_by_name(self, name: str) -> tuple[ServerTool, str]:
        """Find a tool by canonical name, enabled or not.

        Aliases are not resolved here; call ``resolve_tool_aliases`` first.

        Raises:
            ToolDoesNotExistError: If no tool has that name
        """
        for tool in self._tools:
            if tool.name == name:
                return tool, tool.toolset.id
        raise ToolDoesNotExistError(name)

    def find_resource_template_by_name(self, name: str) -> tuple[ServerResourceTemplate, str]:
        for template in self._resource_templates:
            if template.name == name:
                return template, template.toolset.id
        raise CapabilityNotFoundError(CapabilityKind.RESOURCE_TEMPLATE, name)

    def find_prompt_by_name(self, name: str) -> tuple[ServerPrompt, str]:
        for prompt in self._prompts:
            if prompt.name == name:
                return prompt, prompt.toolset.id
        raise CapabilityNotFoundError(CapabilityKind.PROMPT, name)

    def resolve_tool_aliases(self, names: Iterable[str]) -> tuple[list[str], dict[str, str]]:
        return self._aliases.resolve(names)

    # ------------------------------------------------------------------
    # Toolsets
    # ------------------------------------------------------------------

    def _toolset_metadata(self) -> dict[str, ToolsetMetadata]:
        return collect_toolsets(self._tools, self._resource_templates, self._prompts)

    def toolset_ids(self) -> list[str]:
        """Return sorted, unique toolset ids present anywhere in the catalog."""
        return sorted(self._toolset_metadata())

    def has_toolset(self, toolset_id: str) -> bool:
        return toolset_id in self._toolset_metadata()

    def get_toolset(self, toolset_id: str) -> ToolsetMetadata:
        """Return toolset metadata.

        Raises:
            ToolsetDoesNotExistError: If no capability belongs to that toolset
        """
        metadata = self._toolset_metadata().get(toolset_id)
        if metadata is None:
            raise ToolsetDoesNotExistError(toolset_id)
        return metadata

    def available_toolsets(self) -> list[ToolsetMetadata]:
        metadata = self._toolset_metadata()
        return [metadata[toolset_id] for toolset_id in sorted(metadata)]

    def toolset_descriptions(self) -> dict[str, str]:
        return {
            toolset_id: meta.description
            for toolset_id, meta in sorted(self._toolset_metadata().items())
        }

    def tools_for_toolset(self, toolset_id: str) -> list[ServerTool]:
        return sorted(
            (t for t in self._tools if t.toolset.id == toolset_id),
            key=lambda t: t.name,
        )

    def default_toolset_ids(self) -> list[str]:
        return sorted(
            toolset_id
            for toolset_id, meta in self._toolset_metadata().items()
            if meta.default
        )

    def is_toolset_enabled(self, toolset_id: str) -> bool:
        enabled = self._config.enabled_toolsets
        return enabled is None or toolset_id in enabled

    def enabled_toolset_ids(self) -> list[str]:
        """Return toolsets that pass the visibility rule for at least one capability."""
        enabled = {
            toolset_id for toolset_id in self._toolset_metadata()
            if self.is_toolset_enabled(toolset_id)
        }
        additional = self._config.additional_tools
        enabled.update(t.toolset.id for t in self._tools if t.name in additional)
        return sorted(enabled)

    @property
    def requested_toolsets(self) -> tuple[str, ...]:
        return self._requested_toolsets

    def unrecognized_toolsets(self) -> list[str]:
        """Return requested toolset ids missing from the catalog, in request order."""
        known = self._toolset_metadata()
        return [
            toolset_id
            for toolset_id in self._requested_toolsets
            if toolset_id not in RESERVED_TOOLSET_IDS and toolset_id not in known
        ]

    # ------------------------------------------------------------------
    # Request scoping
    # ------------------------------------------------------------------

    def for_mcp_request(self, method: str, item_name: str = "") -> Registry:
        """Return a registry narrowed to what ``method`` can touch.

        The receiver is not modified.
        """
        return scope_for_request(self, method, item_name)
