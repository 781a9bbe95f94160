"""YAML parser for declarative capability catalogs.

A catalog file groups capabilities by toolset::

    toolsets:
      repos:
        description: Repository tools
        default: true
        read_tools:
          - name: get_file_contents
            description: Read a file
            handler: mypkg.handlers:get_file_contents
        write_tools:
          - name: create_branch
        resource_templates:
          - name: repository_content
            uri_template: repo://{owner}/{repo}/contents/{+path}
        prompts:
          - name: summarize_repo
            arguments:
              - name: repo
                required: true
    deprecated_aliases:
      old_get_file: get_file_contents
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mcpcatalog.core.registry import Builder, MisdeclaredCapabilityError
from mcpcatalog.models.capability import (
    PromptArgument,
    ServerPrompt,
    ServerResourceTemplate,
    ServerTool,
    ToolsetMetadata,
)


@dataclass
class Catalog:
    """Parsed catalog contents, ready to install into a Builder."""

    read_tools: list[ServerTool] = field(default_factory=list)
    write_tools: list[ServerTool] = field(default_factory=list)
    resource_templates: list[ServerResourceTemplate] = field(default_factory=list)
    prompts: list[ServerPrompt] = field(default_factory=list)
    deprecated_aliases: dict[str, str] = field(default_factory=dict)

    @property
    def tools(self) -> list[ServerTool]:
        return [*self.read_tools, *self.write_tools]

    def apply(self, builder: Builder) -> Builder:
        """Install every capability and alias into ``builder``.

        Tools go through the read/write registration paths so a misdeclared
        hint aborts here even if the catalog was built in code.
        """
        builder.set_tools([])
        builder.add_read_tools(*self.read_tools)
        builder.add_write_tools(*self.write_tools)
        builder.set_resource_templates(self.resource_templates)
        builder.set_prompts(self.prompts)
        builder.with_deprecated_aliases(self.deprecated_aliases)
        return builder


def load_catalog(path: str | Path) -> Catalog:
    """Parse a catalog YAML file.

    Args:
        path: Path to the catalog YAML file

    Returns:
        Parsed Catalog

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file is invalid
        MisdeclaredCapabilityError: If a tool's read-only hint contradicts its section
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return parse_catalog_dict(data)


def parse_catalog_dict(data: dict[str, Any]) -> Catalog:
    """Parse a catalog from a dictionary.

    Args:
        data: Catalog definition as dict

    Returns:
        Parsed Catalog

    Raises:
        ValueError: If data is invalid or names collide within a kind
        MisdeclaredCapabilityError: If a tool's read-only hint contradicts its section
    """
    if not isinstance(data, dict):
        raise ValueError("Catalog definition must be a dictionary")

    toolsets = data.get("toolsets") or {}
    if not isinstance(toolsets, dict):
        raise ValueError("'toolsets' must be a mapping of toolset id to definition")

    catalog = Catalog()
    for toolset_id, toolset_data in toolsets.items():
        toolset_data = toolset_data or {}
        if not isinstance(toolset_data, dict):
            raise ValueError(f"Toolset '{toolset_id}' must be a mapping")
        metadata = ToolsetMetadata(
            id=str(toolset_id),
            description=toolset_data.get("description", ""),
            default=bool(toolset_data.get("default", False)),
            icon=toolset_data.get("icon"),
        )

        for tool_data in toolset_data.get("read_tools", []):
            catalog.read_tools.append(_parse_tool(tool_data, metadata, read_only=True))
        for tool_data in toolset_data.get("write_tools", []):
            catalog.write_tools.append(_parse_tool(tool_data, metadata, read_only=False))
        for template_data in toolset_data.get("resource_templates", []):
            catalog.resource_templates.append(_parse_resource_template(template_data, metadata))
        for prompt_data in toolset_data.get("prompts", []):
            catalog.prompts.append(_parse_prompt(prompt_data, metadata))

    aliases = data.get("deprecated_aliases") or {}
    if not isinstance(aliases, dict):
        raise ValueError("'deprecated_aliases' must be a mapping of old name to new name")
    catalog.deprecated_aliases = {str(old): str(new) for old, new in aliases.items()}

    _check_unique("tool", [t.name for t in catalog.tools])
    _check_unique("resource template", [r.name for r in catalog.resource_templates])
    _check_unique("prompt", [p.name for p in catalog.prompts])
    return catalog


def _require_name(data: Any, kind: str, toolset: ToolsetMetadata) -> str:
    if not isinstance(data, dict):
        raise ValueError(f"Each {kind} in toolset '{toolset.id}' must be a mapping")
    name = data.get("name")
    if not name:
        raise ValueError(f"A {kind} in toolset '{toolset.id}' is missing a 'name'")
    return str(name)


def _flag_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "feature_flag_enable": data.get("feature_flag_enable"),
        "feature_flag_disable": data.get("feature_flag_disable"),
        "handler": data.get("handler"),
    }


def _parse_tool(data: Any, toolset: ToolsetMetadata, *, read_only: bool) -> ServerTool:
    """Parse a tool entry from a read_tools or write_tools section.

    The section decides the read-only hint. An explicit ``read_only`` key that
    disagrees with the section is a declaration error.
    """
    name = _require_name(data, "tool", toolset)
    declared = data.get("read_only")
    if declared is not None and bool(declared) != read_only:
        raise MisdeclaredCapabilityError(name, expected_read_only=read_only)

    return ServerTool(
        name=name,
        title=data.get("title"),
        description=data.get("description", ""),
        toolset=toolset,
        read_only=read_only,
        input_schema=data.get("input_schema") or {"type": "object", "properties": {}},
        **_flag_fields(data),
    )


def _parse_resource_template(data: Any, toolset: ToolsetMetadata) -> ServerResourceTemplate:
    name = _require_name(data, "resource template", toolset)
    uri_template = data.get("uri_template")
    if not uri_template:
        raise ValueError(f"Resource template '{name}' must have a 'uri_template'")

    return ServerResourceTemplate(
        name=name,
        uri_template=uri_template,
        description=data.get("description", ""),
        mime_type=data.get("mime_type"),
        toolset=toolset,
        **_flag_fields(data),
    )


def _parse_prompt(data: Any, toolset: ToolsetMetadata) -> ServerPrompt:
    name = _require_name(data, "prompt", toolset)
    arguments = []
    for arg in data.get("arguments", []):
        if not isinstance(arg, dict) or not arg.get("name"):
            raise ValueError(f"Prompt '{name}' has an argument without a 'name'")
        arguments.append(
            PromptArgument(
                name=arg["name"],
                description=arg.get("description"),
                required=bool(arg.get("required", False)),
            )
        )

    return ServerPrompt(
        name=name,
        description=data.get("description", ""),
        toolset=toolset,
        arguments=tuple(arguments),
        **_flag_fields(data),
    )


def _check_unique(kind: str, names: list[str]) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    if duplicates:
        raise ValueError(f"Duplicate {kind} names in catalog: {', '.join(duplicates)}")
