"""Shared test fixtures for the mcpcatalog test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from mcpcatalog.models.capability import (
    PromptArgument,
    ServerPrompt,
    ServerResourceTemplate,
    ServerTool,
    ToolsetMetadata,
)


def make_toolset(toolset_id: str, *, default: bool = False) -> ToolsetMetadata:
    """Create toolset metadata for testing.

    This is a module-level function (not a fixture) so it can be called
    with custom arguments. Import it directly:

        from tests.conftest import make_toolset
    """
    return ToolsetMetadata(
        id=toolset_id,
        description=f"Test toolset: {toolset_id}",
        default=default,
    )


def make_tool(
    name: str,
    toolset: str | ToolsetMetadata = "repos",
    *,
    read_only: bool = True,
    enable_flag: str | None = None,
    disable_flag: str | None = None,
    handler: Callable[..., Any] | str | None = None,
) -> ServerTool:
    """Create a ServerTool for testing."""
    metadata = toolset if isinstance(toolset, ToolsetMetadata) else make_toolset(toolset)
    return ServerTool(
        name=name,
        description=f"Test tool {name}",
        toolset=metadata,
        read_only=read_only,
        feature_flag_enable=enable_flag,
        feature_flag_disable=disable_flag,
        handler=handler,
    )


def make_resource(
    name: str,
    toolset: str | ToolsetMetadata = "repos",
    uri_template: str = "repo://{owner}/{repo}",
    *,
    enable_flag: str | None = None,
    disable_flag: str | None = None,
    handler: Callable[..., Any] | str | None = None,
) -> ServerResourceTemplate:
    """Create a ServerResourceTemplate for testing."""
    metadata = toolset if isinstance(toolset, ToolsetMetadata) else make_toolset(toolset)
    return ServerResourceTemplate(
        name=name,
        uri_template=uri_template,
        description=f"Test resource {name}",
        mime_type="text/plain",
        toolset=metadata,
        feature_flag_enable=enable_flag,
        feature_flag_disable=disable_flag,
        handler=handler,
    )


def make_prompt(
    name: str,
    toolset: str | ToolsetMetadata = "repos",
    *,
    arguments: tuple[PromptArgument, ...] = (),
    enable_flag: str | None = None,
    disable_flag: str | None = None,
    handler: Callable[..., Any] | str | None = None,
) -> ServerPrompt:
    """Create a ServerPrompt for testing."""
    metadata = toolset if isinstance(toolset, ToolsetMetadata) else make_toolset(toolset)
    return ServerPrompt(
        name=name,
        description=f"Test prompt {name}",
        toolset=metadata,
        arguments=arguments,
        feature_flag_enable=enable_flag,
        feature_flag_disable=disable_flag,
        handler=handler,
    )


SAMPLE_CATALOG: dict[str, Any] = {
    "toolsets": {
        "context": {
            "description": "User context",
            "default": True,
            "read_tools": [{"name": "get_me", "description": "Get the current user"}],
        },
        "repos": {
            "description": "Repository tools",
            "default": True,
            "read_tools": [{"name": "get_file_contents"}, {"name": "list_commits"}],
            "write_tools": [{"name": "create_branch"}],
            "resource_templates": [
                {
                    "name": "repository_content",
                    "uri_template": "repo://{owner}/{repo}/contents/{+path}",
                    "mime_type": "text/plain",
                }
            ],
        },
        "issues": {
            "description": "Issue tools",
            "read_tools": [{"name": "issue_read"}],
            "write_tools": [{"name": "issue_write"}],
            "prompts": [
                {
                    "name": "triage_issue",
                    "arguments": [{"name": "issue", "required": True}],
                }
            ],
        },
        "actions": {
            "description": "GitHub Actions",
            "read_tools": [
                {"name": "list_workflows"},
                {"name": "actions_get", "feature_flag_enable": "consolidated_actions"},
            ],
        },
    },
    "deprecated_aliases": {
        "get_issue": "issue_read",
        "list_workflow_runs": "actions_get",
    },
}


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    """Write the sample catalog to disk and return its path."""
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump(SAMPLE_CATALOG, sort_keys=False), encoding="utf-8")
    return path
