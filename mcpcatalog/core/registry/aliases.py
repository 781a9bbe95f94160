"""Deprecated tool name aliases."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

logger = logging.getLogger(__name__)


class AliasResolver:
    """Map deprecated capability names to their canonical names.

    Resolution is a single hop: if an alias points at another alias, the
    second one is left as-is. Use ``chained_aliases`` to detect that case.
    """

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._aliases: Mapping[str, str] = MappingProxyType(dict(aliases or {}))

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, name: object) -> bool:
        return name in self._aliases

    def merged(self, aliases: Mapping[str, str]) -> AliasResolver:
        """Return a resolver with ``aliases`` layered over the current table."""
        combined = dict(self._aliases)
        combined.update(aliases)
        return AliasResolver(combined)

    def resolve(self, names: Iterable[str]) -> tuple[list[str], dict[str, str]]:
        """Replace deprecated names with canonical ones.

        Args:
            names: Tool names as supplied by a user or client

        Returns:
            (resolved names in input order, mapping of each alias used to its target)
        """
        resolved: list[str] = []
        aliases_used: dict[str, str] = {}
        for name in names:
            canonical = self._aliases.get(name)
            if canonical is None:
                resolved.append(name)
                continue
            if name not in aliases_used:
                logger.warning('tool "%s" is deprecated, use "%s" instead', name, canonical)
            aliases_used[name] = canonical
            resolved.append(canonical)
        return resolved, aliases_used

    def resolve_one(self, name: str) -> str:
        resolved, _ = self.resolve([name])
        return resolved[0]

    def chained_aliases(self) -> dict[str, str]:
        """Return aliases whose target is itself an alias."""
        return {
            old: new
            for old, new in sorted(self._aliases.items())
            if new in self._aliases
        }
