"""Exception hierarchy for EDID transfer failures."""

from __future__ import annotations


class EdidError(Exception):
    """Base exception for all edidrw errors."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        self.offset = offset
        super().__init__(message)


class PrivilegeError(EdidError):
    """The process is not running with root privilege."""


class MissingToolError(EdidError):
    """A required external transaction tool is not installed."""


class FormatError(EdidError):
    """Hex text is malformed or the EDID signature does not match."""


class TransportError(EdidError):
    """A single bus transaction failed."""


class VerifyError(TransportError):
    """Read-back after a write did not match the written value."""


class UserDeclined(EdidError):
    """The confirmation prompt was answered negatively."""
