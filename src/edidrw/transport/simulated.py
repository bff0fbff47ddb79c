"""In-memory and dry-run transports."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import click

from edidrw.models.edid import EDID_ADDRESS, EDID_SIZE
from edidrw.transport.base import Transport, TransportKind
from edidrw.transport.i2ctools import read_command, write_command


@dataclass(frozen=True)
class Transaction:
    """One recorded bus transaction."""

    kind: str
    offset: int
    value: int


class MemoryTransport(Transport):
    """Simulated EEPROM backed by a bytearray.

    Records every transaction so callers can check order and count.
    """

    def __init__(
        self,
        bus: int = 0,
        address: int = EDID_ADDRESS,
        image: bytes | None = None,
        fill: int = 0x00,
    ) -> None:
        super().__init__(bus, address)
        self.memory = bytearray([fill]) * EDID_SIZE
        if image is not None:
            self.memory[:len(image)] = image[:EDID_SIZE]
        self.transactions: list[Transaction] = []

    @property
    def reads(self) -> list[Transaction]:
        return [t for t in self.transactions if t.kind == "read"]

    @property
    def writes(self) -> list[Transaction]:
        return [t for t in self.transactions if t.kind == "write"]

    def read_byte(self, offset: int) -> int:
        self._check_offset(offset)
        value = self.memory[offset]
        self.transactions.append(Transaction("read", offset, value))
        return value

    def write_byte(self, offset: int, value: int) -> None:
        self._check_offset(offset)
        self._check_value(value)
        self.memory[offset] = value
        self.transactions.append(Transaction("write", offset, value))


def smbus_read_call(bus: int, address: int, offset: int) -> str:
    return f"smbus({bus}).read_byte_data(0x{address:02x}, 0x{offset:02x})"


def smbus_write_call(bus: int, address: int, offset: int, value: int) -> str:
    return f"smbus({bus}).write_byte_data(0x{address:02x}, 0x{offset:02x}, 0x{value:02x})"


class DryRunTransport(MemoryTransport):
    """Prints each transaction instead of running it.

    With the i2c-tools kind the line is the i2cget/i2cset command, with the
    smbus kind it is the smbus2 call. Reads are served from a blank
    in-memory device.
    """

    def __init__(
        self,
        bus: int,
        address: int = EDID_ADDRESS,
        kind: TransportKind = TransportKind.I2C_TOOLS,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        super().__init__(bus, address)
        self.kind = kind
        self._echo = echo

    def read_byte(self, offset: int) -> int:
        if self.kind == TransportKind.SMBUS:
            line = smbus_read_call(self._bus, self._address, offset)
        else:
            line = " ".join(read_command(self._bus, self._address, offset))
        self._echo(line)
        return super().read_byte(offset)

    def write_byte(self, offset: int, value: int) -> None:
        if self.kind == TransportKind.SMBUS:
            line = smbus_write_call(self._bus, self._address, offset, value)
        else:
            line = " ".join(write_command(self._bus, self._address, offset, value))
        self._echo(line)
        super().write_byte(offset, value)
