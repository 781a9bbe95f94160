"""Tests for feature flag gating and checker strategies."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx
import pytest

from mcpcatalog.core.registry import (
    Builder,
    CachedFeatureChecker,
    FeatureChecker,
    FileFeatureChecker,
    HttpFeatureChecker,
    StaticFeatureChecker,
)
from tests.conftest import make_prompt, make_resource, make_tool


class _FailingChecker:
    def __call__(self, ctx: Any, flag_name: str) -> bool:
        raise RuntimeError(f"flag service down for {flag_name}")


class _CountingChecker:
    def __init__(self, enabled: set[str]) -> None:
        self.enabled = enabled
        self.calls: list[tuple[Any, str]] = []

    def __call__(self, ctx: Any, flag_name: str) -> bool:
        self.calls.append((ctx, flag_name))
        return flag_name in self.enabled


def _visible(checker: FeatureChecker | None, *, enable: str | None, disable: str | None) -> bool:
    tool = make_tool("gated", "g", enable_flag=enable, disable_flag=disable)
    registry = Builder().set_tools([tool]).with_toolsets(["all"]).with_feature_checker(checker).build()
    return bool(registry.available_tools())


# (enable flag state, disable flag state) -> visible
# state: None = flag not declared, False/True = checker answer for declared flag
TRUTH_TABLE = [
    (None, None, True),
    (None, False, True),
    (None, True, False),
    (False, None, False),
    (False, False, False),
    (False, True, False),
    (True, None, True),
    (True, False, True),
    (True, True, False),
]


class TestTruthTable:
    """Visibility for every combination of enable/disable flags."""

    @pytest.mark.parametrize(("enable_state", "disable_state", "expected"), TRUTH_TABLE)
    def test_flag_combinations(self, enable_state, disable_state, expected):
        on: set[str] = set()
        if enable_state:
            on.add("enable_me")
        if disable_state:
            on.add("disable_me")

        visible = _visible(
            StaticFeatureChecker(on),
            enable="enable_me" if enable_state is not None else None,
            disable="disable_me" if disable_state is not None else None,
        )

        assert visible is expected

    def test_missing_checker_fails_closed_for_enable(self):
        assert _visible(None, enable="beta", disable=None) is False

    def test_missing_checker_fails_open_for_disable(self):
        assert _visible(None, enable=None, disable="kill_switch") is True

    def test_checker_error_enable_fails_closed(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING):
            assert _visible(_FailingChecker(), enable="beta", disable=None) is False

        assert "Feature flag check failed for beta" in caplog.text

    def test_checker_error_disable_fails_open(self):
        assert _visible(_FailingChecker(), enable=None, disable="kill_switch") is True


class TestGatingAcrossKinds:
    """Feature flags apply to resources and prompts too."""

    def test_resources_and_prompts_are_gated(self):
        registry = (
            Builder()
            .set_resource_templates(
                [make_resource("on", enable_flag="f"), make_resource("off", enable_flag="g")]
            )
            .set_prompts([make_prompt("shown"), make_prompt("hidden", disable_flag="f")])
            .with_toolsets(["all"])
            .with_feature_checker(StaticFeatureChecker({"f"}))
            .build()
        )

        assert [r.name for r in registry.available_resource_templates()] == ["on"]
        assert [p.name for p in registry.available_prompts()] == ["shown"]

    def test_checker_called_per_query_with_context(self):
        checker = _CountingChecker({"beta"})
        registry = (
            Builder()
            .set_tools([make_tool("a", enable_flag="beta"), make_tool("b")])
            .with_toolsets(["all"])
            .with_feature_checker(checker)
            .build()
        )
        ctx = object()

        registry.available_tools(ctx)
        registry.available_tools(ctx)

        assert checker.calls == [(ctx, "beta"), (ctx, "beta")]


class TestFileFeatureChecker:
    """Tests for the YAML file checker."""

    def test_reads_flags_mapping(self, tmp_path: Path):
        path = tmp_path / "flags.yaml"
        path.write_text("flags:\n  beta: true\n  legacy: false\n", encoding="utf-8")
        checker = FileFeatureChecker(path)

        assert checker(None, "beta") is True
        assert checker(None, "legacy") is False
        assert checker(None, "unknown") is False

    def test_accepts_bare_mapping_and_rereads(self, tmp_path: Path):
        path = tmp_path / "flags.yaml"
        path.write_text("beta: false\n", encoding="utf-8")
        checker = FileFeatureChecker(path)

        assert checker(None, "beta") is False
        path.write_text("beta: true\n", encoding="utf-8")
        assert checker(None, "beta") is True

    def test_missing_file_raises(self, tmp_path: Path):
        checker = FileFeatureChecker(tmp_path / "missing.yaml")

        with pytest.raises(FileNotFoundError):
            checker(None, "beta")

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / "flags.yaml"
        path.write_text("- beta\n", encoding="utf-8")

        with pytest.raises(ValueError, match="must be a mapping"):
            FileFeatureChecker(path)(None, "beta")


class TestHttpFeatureChecker:
    """Tests for the remote flag service checker."""

    def _checker(self, handler) -> HttpFeatureChecker:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpFeatureChecker("https://flags.example.com/", client=client)

    def test_enabled_flag(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"enabled": True})

        assert self._checker(handler)(None, "beta") is True
        assert seen == ["https://flags.example.com/flags/beta"]

    def test_disabled_flag(self):
        checker = self._checker(lambda request: httpx.Response(200, json={"enabled": False}))

        assert checker(None, "beta") is False

    def test_http_error_raises(self):
        checker = self._checker(lambda request: httpx.Response(503))

        with pytest.raises(httpx.HTTPStatusError):
            checker(None, "beta")

    def test_bad_payload_raises(self):
        checker = self._checker(lambda request: httpx.Response(200, json={"value": 1}))

        with pytest.raises(ValueError, match="Unexpected flag payload"):
            checker(None, "beta")

    def test_http_error_hides_gated_tool(self):
        checker = self._checker(lambda request: httpx.Response(500))
        registry = (
            Builder()
            .set_tools([make_tool("gated", enable_flag="beta"), make_tool("killable", disable_flag="off")])
            .with_toolsets(["all"])
            .with_feature_checker(checker)
            .build()
        )

        assert [t.name for t in registry.available_tools()] == ["killable"]


class TestCachedFeatureChecker:
    """Tests for the TTL cache wrapper."""

    def test_caches_within_ttl(self):
        inner = _CountingChecker({"beta"})
        now = [100.0]
        checker = CachedFeatureChecker(inner, ttl_seconds=10, clock=lambda: now[0])

        assert checker(None, "beta") is True
        now[0] = 105.0
        assert checker(None, "beta") is True
        assert len(inner.calls) == 1

        now[0] = 111.0
        assert checker(None, "beta") is True
        assert len(inner.calls) == 2

    def test_errors_are_not_cached(self):
        calls = []

        def flaky(ctx: Any, flag_name: str) -> bool:
            calls.append(flag_name)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return True

        checker = CachedFeatureChecker(flaky, ttl_seconds=60)

        with pytest.raises(RuntimeError):
            checker(None, "beta")
        assert checker(None, "beta") is True
        assert checker(None, "beta") is True
        assert len(calls) == 2

    def test_clear(self):
        inner = _CountingChecker(set())
        checker = CachedFeatureChecker(inner, ttl_seconds=60)

        checker(None, "beta")
        checker.clear()
        checker(None, "beta")

        assert len(inner.calls) == 2


def test_static_checker_satisfies_protocol():
    assert isinstance(StaticFeatureChecker(), FeatureChecker)
