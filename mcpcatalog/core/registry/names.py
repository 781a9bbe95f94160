"""Name list normalisation shared by the builder and configuration layer."""

from __future__ import annotations

from collections.abc import Iterable

ALL_TOOLSETS = "all"
DEFAULT_TOOLSETS = "default"
RESERVED_TOOLSET_IDS = frozenset({ALL_TOOLSETS, DEFAULT_TOOLSETS})


def clean_names(names: Iterable[str]) -> list[str]:
    """Trim names, drop empty entries and remove duplicates, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        trimmed = name.strip()
        if not trimmed or trimmed in seen:
            continue
        seen.add(trimmed)
        result.append(trimmed)
    return result


def remove_toolset(names: Iterable[str], to_remove: str) -> list[str]:
    return [name for name in names if name != to_remove]


def contains_toolset(names: Iterable[str], to_check: str) -> bool:
    return to_check in names


def expand_default_toolset(names: list[str], default_ids: Iterable[str]) -> list[str]:
    """Replace the ``default`` keyword with the default toolset ids.

    Ids already listed explicitly are not repeated. Lists without the keyword
    are returned unchanged.
    """
    if DEFAULT_TOOLSETS not in names:
        return names
    seen = set(names)
    result = remove_toolset(names, DEFAULT_TOOLSETS)
    for toolset_id in default_ids:
        if toolset_id not in seen:
            seen.add(toolset_id)
            result.append(toolset_id)
    return result
