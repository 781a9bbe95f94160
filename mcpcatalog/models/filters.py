"""Filter configuration carried by a registry."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class FilterConfig(BaseModel):
    """Immutable filter state evaluated by ``Registry.available_*``.

    A request-scoped registry carries a copy of its parent's config with the
    narrowing fields updated; the capability catalog itself is shared.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # None means every toolset is enabled ("all")
    enabled_toolsets: frozenset[str] | None = None
    read_only: bool = False
    # Canonical tool names that bypass toolset filtering
    additional_tools: frozenset[str] = frozenset()
    feature_checker: Any | None = None

    # Request narrowing
    include_tools: bool = True
    include_resources: bool = True
    include_prompts: bool = True
    tool_name: str | None = None
    resource_uri: str | None = None
    prompt_name: str | None = None

    def all_toolsets_enabled(self) -> bool:
        return self.enabled_toolsets is None
