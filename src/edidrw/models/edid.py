"""EDID blob and write result models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

# Standard DDC EEPROM address of a display's EDID.
EDID_ADDRESS = 0x50
EDID_SIZE = 256
EDID_SIGNATURE = bytes([0x00, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0x00])


class EdidBlob(BaseModel):
    """Raw EDID bytes as read from a device or decoded from hex text."""

    data: bytes = Field(max_length=EDID_SIZE)

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_bytes(cls, value: object) -> object:
        if isinstance(value, (bytearray, list, tuple)):
            return bytes(value)
        return value

    @property
    def hex(self) -> str:
        """Contiguous lowercase hex, two characters per byte."""
        return self.data.hex()

    @property
    def has_valid_signature(self) -> bool:
        return self.data[:len(EDID_SIGNATURE)] == EDID_SIGNATURE

    def __len__(self) -> int:
        return len(self.data)


class WriteReport(BaseModel):
    """Outcome of a write_edid call."""

    bytes_supplied: int = 0
    bytes_written: int = 0
    truncated: bool = False
    verified: bool = False

    @property
    def bytes_dropped(self) -> int:
        return max(self.bytes_supplied - EDID_SIZE, 0)
