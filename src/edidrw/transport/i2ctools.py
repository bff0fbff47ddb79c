"""Transport that shells out to the i2c-tools ``i2cget``/``i2cset`` commands."""

from __future__ import annotations

import shutil
import subprocess

from edidrw.exceptions import MissingToolError, TransportError
from edidrw.transport.base import Transport
from edidrw.utils.logging import get_logger

logger = get_logger(__name__)

I2CGET = "i2cget"
I2CSET = "i2cset"
REQUIRED_TOOLS = (I2CGET, I2CSET)


def find_missing_tools() -> list[str]:
    """Return the required i2c-tools commands that are not on PATH."""
    return [tool for tool in REQUIRED_TOOLS if shutil.which(tool) is None]


def read_command(bus: int, address: int, offset: int) -> list[str]:
    return [I2CGET, "-y", str(bus), f"0x{address:02x}", f"0x{offset:02x}"]


def write_command(bus: int, address: int, offset: int, value: int) -> list[str]:
    return [
        I2CSET, "-y", str(bus), f"0x{address:02x}", f"0x{offset:02x}", f"0x{value:02x}",
    ]


class I2cToolsTransport(Transport):
    """Byte transactions through i2cget/i2cset subprocesses."""

    def open(self) -> None:
        if self._open:
            return
        missing = find_missing_tools()
        if missing:
            raise MissingToolError(
                f"Required tools not found: {', '.join(missing)} "
                "(install the i2c-tools package)"
            )
        super().open()

    def read_byte(self, offset: int) -> int:
        self._check_offset(offset)
        output = self._run(read_command(self._bus, self._address, offset), offset)
        try:
            value = int(output.strip(), 16)
        except ValueError:
            raise TransportError(
                f"Unexpected i2cget output at offset 0x{offset:02x}: {output.strip()!r}",
                offset=offset,
            ) from None
        if not 0 <= value <= 0xFF:
            raise TransportError(
                f"i2cget returned out-of-range value {value:#x}", offset=offset
            )
        return value

    def write_byte(self, offset: int, value: int) -> None:
        self._check_offset(offset)
        self._check_value(value)
        self._run(write_command(self._bus, self._address, offset, value), offset)

    def _run(self, cmd: list[str], offset: int) -> str:
        logger.debug("i2c_command", cmd=" ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError:
            raise MissingToolError(f"{cmd[0]} not found") from None

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise TransportError(
                f"{cmd[0]} failed at offset 0x{offset:02x}: {detail}", offset=offset
            )
        return result.stdout
