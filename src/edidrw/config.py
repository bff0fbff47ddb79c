"""Immutable run configuration and the closed set of CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from edidrw.transport.base import TransportKind
from edidrw.transport.smbus import DEFAULT_WRITE_DELAY_S


@dataclass(frozen=True)
class EdidConfig:
    """Options parsed once from the command line."""

    danger_mode: bool = False
    bus: int | None = None
    transport: TransportKind = TransportKind.I2C_TOOLS
    write_delay: float = DEFAULT_WRITE_DELAY_S

    @classmethod
    def from_flags(
        cls,
        danger: bool,
        dry_run: bool,
        bus: int | None,
        transport: TransportKind | str = TransportKind.I2C_TOOLS,
        write_delay: float = DEFAULT_WRITE_DELAY_S,
    ) -> EdidConfig:
        """Combine -d/-n; dry-run always wins over danger mode."""
        return cls(
            danger_mode=danger and not dry_run,
            bus=bus,
            transport=TransportKind(transport),
            write_delay=write_delay,
        )


@dataclass(frozen=True)
class ReadEdid:
    """Dump the device EDID as hex."""

    output: Path | None = None


@dataclass(frozen=True)
class WriteEdid:
    """Write the hex EDID stored in *path*."""

    path: Path
    verify: bool = False


Command = ReadEdid | WriteEdid
