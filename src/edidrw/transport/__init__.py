"""Byte-level I2C transports for the EDID EEPROM."""

from edidrw.transport.base import Transport, TransportKind
from edidrw.transport.factory import make_transport
from edidrw.transport.i2ctools import I2cToolsTransport
from edidrw.transport.simulated import DryRunTransport, MemoryTransport, Transaction
from edidrw.transport.smbus import SmbusTransport

__all__ = [
    "DryRunTransport",
    "I2cToolsTransport",
    "MemoryTransport",
    "SmbusTransport",
    "Transaction",
    "Transport",
    "TransportKind",
    "make_transport",
]
