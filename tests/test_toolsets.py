"""Tests for toolset selection helpers."""

from __future__ import annotations

import pytest

from mcpcatalog.core.registry import Builder, ToolsetDoesNotExistError
from mcpcatalog.core.toolsets import (
    clean_names,
    contains_toolset,
    enable_toolsets,
    expand_default_toolset,
    generate_toolsets_help,
    parse_toolsets_option,
    remove_toolset,
)
from tests.conftest import make_tool, make_toolset


def _registry():
    return (
        Builder()
        .set_tools(
            [
                make_tool("get_me", make_toolset("context", default=True)),
                make_tool("list_commits", make_toolset("repos", default=True)),
                make_tool("list_workflows", "actions"),
                make_tool("issue_read", "issues"),
            ]
        )
        .build()
    )


class TestNameHelpers:
    """Tests for list normalisation."""

    def test_clean_names(self):
        assert clean_names([" a", "b ", "", "a", "  ", "c"]) == ["a", "b", "c"]

    def test_parse_toolsets_option(self):
        assert parse_toolsets_option(None) is None
        assert parse_toolsets_option("") == []
        assert parse_toolsets_option("repos, issues,,repos") == ["repos", "issues"]

    def test_remove_and_contains(self):
        names = ["default", "actions", "default"]

        assert remove_toolset(names, "default") == ["actions"]
        assert contains_toolset(names, "actions")
        assert not contains_toolset(names, "repos")

    def test_expand_default_toolset(self):
        expanded = expand_default_toolset(["default", "actions"], ["context", "repos"])

        assert set(expanded) == {"actions", "context", "repos"}
        assert len(expanded) == 3

    def test_expand_default_does_not_duplicate_explicit_ids(self):
        expanded = expand_default_toolset(["repos", "default"], ["context", "repos"])

        assert expanded == ["repos", "context"]

    def test_expand_without_keyword_is_unchanged(self):
        assert expand_default_toolset(["actions"], ["context"]) == ["actions"]


class TestEnableToolsets:
    """Tests for explicit toolset validation."""

    def test_collects_unknown_ids(self):
        assert enable_toolsets(_registry(), ["repos", "typo", "all", "default", "nope"]) == ["typo", "nope"]

    def test_error_on_unknown(self):
        with pytest.raises(ToolsetDoesNotExistError, match="toolset typo does not exist"):
            enable_toolsets(_registry(), ["repos", "typo"], error_on_unknown=True)

    def test_keywords_never_raise(self):
        assert enable_toolsets(_registry(), ["all", "default"], error_on_unknown=True) == []


class TestToolsetsHelp:
    """Tests for the generated --toolsets help text."""

    def test_lists_available_and_default_toolsets(self):
        text = generate_toolsets_help(_registry())

        assert "Available: actions, context, issues, repos" in text
        assert "Enables the default toolset configuration of:\n\t     context, repos" in text
        assert "--toolsets=all" in text

    def test_wraps_long_toolset_lists(self):
        tools = [make_tool(f"t{i}", f"toolset_number_{i:02d}") for i in range(8)]
        text = generate_toolsets_help(Builder().set_tools(tools).build())

        available_section = text.split("Available: ", 1)[1].split("\nSpecial", 1)[0]
        lines = available_section.split(",\n\t     ")
        assert len(lines) > 1
        assert all(len(line) <= 70 for line in lines)
