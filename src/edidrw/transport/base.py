"""Abstract byte-level I2C transport."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum

from edidrw.models.edid import EDID_ADDRESS, EDID_SIZE


class TransportKind(StrEnum):
    """Available transport backends."""
    I2C_TOOLS = "i2c-tools"
    SMBUS = "smbus"


class Transport(ABC):
    """One device on one I2C bus, accessed a byte at a time.

    Every read_byte/write_byte call is exactly one bus transaction.
    """

    def __init__(self, bus: int, address: int = EDID_ADDRESS) -> None:
        self._bus = bus
        self._address = address
        self._open = False

    @property
    def bus(self) -> int:
        return self._bus

    @property
    def address(self) -> int:
        return self._address

    @property
    def is_open(self) -> bool:
        return self._open

    @abstractmethod
    def read_byte(self, offset: int) -> int:
        """Read the byte at *offset* of the device address space."""

    @abstractmethod
    def write_byte(self, offset: int, value: int) -> None:
        """Write *value* at *offset* of the device address space."""

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def __enter__(self) -> Transport:
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @staticmethod
    def _check_offset(offset: int) -> None:
        if not 0 <= offset < EDID_SIZE:
            raise ValueError(f"Offset must be in 0..{EDID_SIZE - 1}, got {offset}")

    @staticmethod
    def _check_value(value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value must be in 0..255, got {value}")
