"""Registry error taxonomy."""

from __future__ import annotations

from mcpcatalog.models.capability import CapabilityKind


class RegistryError(Exception):
    """Base class for registry errors."""


class ToolsetDoesNotExistError(RegistryError):
    """Raised when a caller explicitly enables a toolset missing from the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"toolset {name} does not exist")
        self.name = name


class CapabilityNotFoundError(RegistryError, LookupError):
    """Raised by canonical-name lookups when no capability has that name."""

    def __init__(self, kind: CapabilityKind, name: str) -> None:
        label = "resource template" if kind == CapabilityKind.RESOURCE_TEMPLATE else kind.value
        super().__init__(f"{label} {name} does not exist")
        self.kind = kind
        self.name = name


class ToolDoesNotExistError(CapabilityNotFoundError):
    """Raised when no tool has the requested canonical name."""

    def __init__(self, name: str) -> None:
        super().__init__(CapabilityKind.TOOL, name)


class MisdeclaredCapabilityError(RegistryError):
    """Raised when a tool's read-only hint contradicts its registration path.

    This is a programming error in the catalog and should abort startup.
    """

    def __init__(self, name: str, *, expected_read_only: bool) -> None:
        if expected_read_only:
            message = f"tool ({name}) must be annotated as read-only"
        else:
            message = f"tool ({name}) is incorrectly annotated as read-only"
        super().__init__(message)
        self.name = name
        self.expected_read_only = expected_read_only
