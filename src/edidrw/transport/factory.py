"""Build the transport selected by an EdidConfig."""

from __future__ import annotations

from typing import TYPE_CHECKING

from edidrw.exceptions import EdidError
from edidrw.transport.base import Transport, TransportKind
from edidrw.transport.i2ctools import I2cToolsTransport
from edidrw.transport.simulated import DryRunTransport
from edidrw.transport.smbus import SmbusTransport

if TYPE_CHECKING:
    from edidrw.config import EdidConfig


def make_transport(config: EdidConfig) -> Transport:
    """Return a real transport in danger mode, a dry-run transport otherwise."""
    if config.bus is None:
        raise EdidError("No I2C bus specified (use -b BUS)")

    if not config.danger_mode:
        return DryRunTransport(config.bus, kind=config.transport)

    match config.transport:
        case TransportKind.I2C_TOOLS:
            return I2cToolsTransport(config.bus)
        case TransportKind.SMBUS:
            return SmbusTransport(config.bus, write_delay=config.write_delay)
        case _:
            raise EdidError(f"Unknown transport: {config.transport}")
