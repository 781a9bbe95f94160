"""Tests for server configuration loading and registry assembly."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from mcpcatalog.core.registry import (
    CachedFeatureChecker,
    FileFeatureChecker,
    HttpFeatureChecker,
    StaticFeatureChecker,
)
from mcpcatalog.utils.config import (
    FeatureFlagsConfig,
    ServerConfig,
    build_feature_checker,
    build_registry,
    load_config,
)


def _write_config(tmp_path: Path, payload: dict) -> Path:
    path = tmp_path / "mcpcatalog.yaml"
    path.write_text(yaml.safe_dump(payload), encoding="utf-8")
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.toolsets is None
        assert config.tools == []
        assert config.read_only is False
        assert config.feature_flags.is_configured() is False

    def test_relative_paths_resolve_against_config_dir(self, tmp_path: Path):
        path = _write_config(
            tmp_path,
            {"catalog": "catalog.yaml", "feature_flags": {"file": "flags.yaml"}},
        )

        config = load_config(path)

        assert config.catalog == str(tmp_path / "catalog.yaml")
        assert config.feature_flags.file == str(tmp_path / "flags.yaml")

    def test_comma_separated_strings_are_split(self, tmp_path: Path):
        path = _write_config(tmp_path, {"toolsets": "repos,issues", "tools": "get_me"})

        config = load_config(path)

        assert config.toolsets == ["repos", "issues"]
        assert config.tools == ["get_me"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_types(self, tmp_path: Path):
        path = _write_config(tmp_path, {"read_only": {"nested": True}})

        with pytest.raises(ValueError, match="Invalid config"):
            load_config(path)

    def test_non_mapping(self, tmp_path: Path):
        path = tmp_path / "mcpcatalog.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Expected YAML mapping"):
            load_config(path)


class TestFeatureCheckerFactory:
    """Tests for build_feature_checker."""

    def test_unset(self):
        assert build_feature_checker(FeatureFlagsConfig()) is None

    def test_static(self):
        checker = build_feature_checker(FeatureFlagsConfig(enabled=["beta"]))

        assert isinstance(checker, StaticFeatureChecker)
        assert checker(None, "beta") is True

    def test_file(self, tmp_path: Path):
        checker = build_feature_checker(FeatureFlagsConfig(file=str(tmp_path / "f.yaml")))

        assert isinstance(checker, FileFeatureChecker)

    def test_url_takes_precedence_and_is_cached(self):
        checker = build_feature_checker(
            FeatureFlagsConfig(url="https://flags.example.com", file="f.yaml", cache_ttl_seconds=30)
        )

        assert isinstance(checker, CachedFeatureChecker)
        assert isinstance(checker.inner, HttpFeatureChecker)


class TestBuildRegistry:
    """Tests for build_registry."""

    def test_defaults_from_catalog(self, catalog_path: Path):
        registry = build_registry(ServerConfig(catalog=str(catalog_path)))

        assert registry.enabled_toolset_ids() == ["context", "repos"]

    def test_filters_applied(self, catalog_path: Path):
        config = ServerConfig(
            catalog=str(catalog_path),
            toolsets=["actions"],
            tools=["get_issue"],
            read_only=True,
            feature_flags=FeatureFlagsConfig(enabled=["consolidated_actions"]),
        )

        registry = build_registry(config)

        assert [t.name for t in registry.available_tools()] == [
            "actions_get",
            "list_workflows",
            "issue_read",
        ]

    def test_config_aliases_override_catalog(self, catalog_path: Path):
        config = ServerConfig(
            catalog=str(catalog_path),
            deprecated_aliases={"get_issue": "issue_write"},
        )

        registry = build_registry(config)

        assert registry.aliases.resolve_one("get_issue") == "issue_write"

    def test_unrecognized_toolsets_reported(self, catalog_path: Path):
        registry = build_registry(ServerConfig(catalog=str(catalog_path), toolsets=["repos", "typo"]))

        assert registry.unrecognized_toolsets() == ["typo"]

    def test_chained_alias_warning(self, catalog_path: Path, caplog: pytest.LogCaptureFixture):
        config = ServerConfig(
            catalog=str(catalog_path),
            deprecated_aliases={"older_issue": "get_issue"},
        )

        with caplog.at_level(logging.WARNING, logger="mcpcatalog.utils.config"):
            build_registry(config)

        assert 'alias "older_issue" points at "get_issue"' in caplog.text

    def test_catalog_required(self):
        with pytest.raises(ValueError, match="No catalog configured"):
            build_registry(ServerConfig())
