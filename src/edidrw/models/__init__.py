"""Pydantic models for EDID data and transfer results."""

from edidrw.models.edid import (
    EDID_ADDRESS,
    EDID_SIGNATURE,
    EDID_SIZE,
    EdidBlob,
    WriteReport,
)

__all__ = [
    "EDID_ADDRESS",
    "EDID_SIGNATURE",
    "EDID_SIZE",
    "EdidBlob",
    "WriteReport",
]
