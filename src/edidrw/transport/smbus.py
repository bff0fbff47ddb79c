"""Direct /dev/i2c-N access through smbus2."""

from __future__ import annotations

import time

from smbus2 import SMBus

from edidrw.exceptions import TransportError
from edidrw.models.edid import EDID_ADDRESS
from edidrw.transport.base import Transport
from edidrw.utils.logging import get_logger

logger = get_logger(__name__)

# EEPROM internal write cycle (tWR) for 24C02-class parts is 5 ms max.
DEFAULT_WRITE_DELAY_S = 0.01


class SmbusTransport(Transport):
    """Byte transactions via SMBus read/write byte-data ioctls."""

    def __init__(
        self,
        bus: int,
        address: int = EDID_ADDRESS,
        write_delay: float = DEFAULT_WRITE_DELAY_S,
    ) -> None:
        super().__init__(bus, address)
        self._write_delay = write_delay
        self._smbus: SMBus | None = None

    def open(self) -> None:
        if self._open:
            return
        logger.debug("smbus_opening", bus=self._bus)
        try:
            self._smbus = SMBus(self._bus)
        except OSError as exc:
            raise TransportError(f"Cannot open /dev/i2c-{self._bus}: {exc}") from exc
        super().open()

    def close(self) -> None:
        if self._smbus is not None:
            self._smbus.close()
            self._smbus = None
        super().close()

    def read_byte(self, offset: int) -> int:
        self._check_offset(offset)
        try:
            return self._device().read_byte_data(self._address, offset)
        except OSError as exc:
            raise TransportError(
                f"Read failed at offset 0x{offset:02x}: {exc}", offset=offset
            ) from exc

    def write_byte(self, offset: int, value: int) -> None:
        self._check_offset(offset)
        self._check_value(value)
        try:
            self._device().write_byte_data(self._address, offset, value)
        except OSError as exc:
            raise TransportError(
                f"Write failed at offset 0x{offset:02x}: {exc}", offset=offset
            ) from exc
        if self._write_delay > 0:
            time.sleep(self._write_delay)

    def _device(self) -> SMBus:
        if self._smbus is None:
            raise TransportError(f"Bus {self._bus} is not open")
        return self._smbus
