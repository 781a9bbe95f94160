"""Feature flag checkers.

A checker is any callable ``(ctx, flag_name) -> bool``. Raising signals a
failed lookup; the registry treats that as ``False`` and never propagates it.
``ctx`` is whatever the caller passed to ``Registry.available_*`` (for the MCP
server, the active request context) and is forwarded untouched.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx
import yaml


@runtime_checkable
class FeatureChecker(Protocol):
    """Strategy deciding whether a named feature flag is on."""

    def __call__(self, ctx: Any, flag_name: str) -> bool: ...


class StaticFeatureChecker:
    """Checker backed by a fixed set of enabled flag names."""

    def __init__(self, enabled: Iterable[str] = ()) -> None:
        self.enabled = frozenset(enabled)

    def __call__(self, ctx: Any, flag_name: str) -> bool:  # noqa: ARG002
        return flag_name in self.enabled


class FileFeatureChecker:
    """Checker reading a YAML ``flag: bool`` mapping on every lookup."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __call__(self, ctx: Any, flag_name: str) -> bool:  # noqa: ARG002
        with open(self.path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Feature flag file must be a mapping: {self.path}")
        flags = data.get("flags", data)
        if not isinstance(flags, dict):
            raise ValueError(f"'flags' must be a mapping in {self.path}")
        return bool(flags.get(flag_name, False))


class HttpFeatureChecker:
    """Checker querying a remote flag service.

    Performs ``GET {base_url}/flags/{flag_name}`` and expects a JSON body of the
    form ``{"enabled": true}``. Non-2xx responses and transport errors raise.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.Client | None = None,
        timeout: float = 2.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout, headers=headers)

    def __call__(self, ctx: Any, flag_name: str) -> bool:  # noqa: ARG002
        response = self._client.get(f"{self.base_url}/flags/{flag_name}")
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict) or "enabled" not in payload:
            raise ValueError(f"Unexpected flag payload for {flag_name}: {payload!r}")
        return bool(payload["enabled"])

    def close(self) -> None:
        self._client.close()


class CachedFeatureChecker:
    """Wrap a checker with a per-flag TTL cache.

    Failed lookups are not cached; the exception propagates to the registry.
    """

    def __init__(
        self,
        inner: FeatureChecker,
        ttl_seconds: float = 30.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.inner = inner
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: dict[str, tuple[float, bool]] = {}
        self._lock = threading.Lock()

    def __call__(self, ctx: Any, flag_name: str) -> bool:
        now = self._clock()
        with self._lock:
            cached = self._cache.get(flag_name)
        if cached is not None and now - cached[0] < self.ttl_seconds:
            return cached[1]

        value = bool(self.inner(ctx, flag_name))
        with self._lock:
            self._cache[flag_name] = (now, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def close(self) -> None:
        close = getattr(self.inner, "close", None)
        if callable(close):
            close()
