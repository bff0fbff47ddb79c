"""EDID read and write procedures over a byte transport.

Both procedures issue one bus transaction per byte, in ascending offset
order, and never retry. A transport failure mid-write leaves the device
partially written.
"""

from __future__ import annotations

from collections.abc import Callable

from edidrw.core.validation import decode_hex_text, validate_edid_signature
from edidrw.exceptions import UserDeclined, VerifyError
from edidrw.models.edid import EDID_SIGNATURE, EDID_SIZE, EdidBlob, WriteReport
from edidrw.transport.base import Transport
from edidrw.utils.logging import get_logger

logger = get_logger(__name__)


def _always_confirm() -> bool:
    return True


def read_bytes(transport: Transport, count: int) -> bytes:
    """Read offsets ``0..count-1`` one transaction at a time."""
    return bytes(transport.read_byte(offset) for offset in range(count))


def read_signature(transport: Transport) -> bytes:
    """Read just the 8 header bytes of the device."""
    return read_bytes(transport, len(EDID_SIGNATURE))


def read_edid(transport: Transport) -> EdidBlob:
    """Read the full 256-byte EDID.

    The result is not validated; whatever the device holds is returned.
    """
    logger.info("edid_read_start", bus=transport.bus, address=hex(transport.address))
    blob = EdidBlob(data=read_bytes(transport, EDID_SIZE))
    logger.info("edid_read_complete", valid_signature=blob.has_valid_signature)
    return blob


def write_edid(
    transport: Transport,
    hex_text: str,
    confirm: Callable[[], bool] = _always_confirm,
    check_device: bool = True,
    verify: bool = False,
) -> WriteReport:
    """Validate *hex_text* and write it to the device byte by byte.

    Args:
        transport: Open transport bound to the EDID EEPROM.
        hex_text: Hex digits, whitespace ignored.
        confirm: Called once all validation passed; False aborts with no writes.
        check_device: Read and validate the device header first. Disabled in
            dry-run mode where the device is blank.
        verify: Read back every written byte afterwards.

    Returns:
        WriteReport describing what was written.

    Raises:
        FormatError: Device header or input text failed validation.
        UserDeclined: The confirm callback returned False.
        TransportError: A bus transaction failed.
    """
    if check_device:
        validate_edid_signature(read_signature(transport))
        logger.debug("edid_device_validated", bus=transport.bus)

    data = decode_hex_text(hex_text)
    validate_edid_signature(data)
    logger.debug("edid_input_validated", length=len(data))

    if not confirm():
        logger.info("edid_write_declined")
        raise UserDeclined("Write not confirmed, nothing written")

    payload = data[:EDID_SIZE]
    truncated = len(data) > EDID_SIZE
    if truncated:
        logger.info(
            "edid_input_truncated", supplied=len(data), written=EDID_SIZE
        )

    logger.info("edid_write_start", bus=transport.bus, count=len(payload))
    for offset, value in enumerate(payload):
        transport.write_byte(offset, value)
    logger.info("edid_write_complete", count=len(payload))

    if verify:
        _verify(transport, payload)

    return WriteReport(
        bytes_supplied=len(data),
        bytes_written=len(payload),
        truncated=truncated,
        verified=verify,
    )


def _verify(transport: Transport, payload: bytes) -> None:
    readback = read_bytes(transport, len(payload))
    for offset, (wrote, read) in enumerate(zip(payload, readback)):
        if wrote != read:
            raise VerifyError(
                f"Verify failed at offset 0x{offset:02x}: "
                f"wrote 0x{wrote:02x}, read 0x{read:02x}",
                offset=offset,
            )
    logger.info("edid_verify_complete", count=len(payload))
