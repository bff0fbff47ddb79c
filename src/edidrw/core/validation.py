"""Local, side-effect-free checks on EDID hex text and bytes."""

from __future__ import annotations

import re
import string

from edidrw.exceptions import FormatError
from edidrw.models.edid import EDID_SIGNATURE

_WHITESPACE_RE = re.compile(r"\s+")
_HEX_DIGITS = frozenset(string.hexdigits)


def strip_whitespace(text: str) -> str:
    """Remove every whitespace character, newlines included."""
    return _WHITESPACE_RE.sub("", text)


def validate_hex_text(text: str) -> None:
    """Check that *text* holds only hex digits once whitespace is removed.

    Raises:
        FormatError: On the first character outside ``[0-9a-fA-F]``.
    """
    stripped = strip_whitespace(text)
    for pos, char in enumerate(stripped):
        if char not in _HEX_DIGITS:
            raise FormatError(
                f"Invalid character {char!r} at position {pos} in hex data"
            )


def validate_edid_signature(data: bytes) -> None:
    """Check that *data* starts with the 8-byte EDID header.

    Raises:
        FormatError: If fewer than 8 bytes are given or the header differs.
    """
    head = bytes(data[:len(EDID_SIGNATURE)])
    if head.hex().lower() != EDID_SIGNATURE.hex():
        raise FormatError(
            f"EDID signature mismatch: expected {EDID_SIGNATURE.hex()}, "
            f"got {head.hex() or '<empty>'}"
        )


def decode_hex_text(text: str) -> bytes:
    """Validate and decode hex text, two digits per byte, in order.

    Raises:
        FormatError: On a non-hex character or an odd number of digits.
    """
    validate_hex_text(text)
    stripped = strip_whitespace(text)
    if len(stripped) % 2:
        raise FormatError(
            f"Hex data has an odd number of digits ({len(stripped)})"
        )
    return bytes.fromhex(stripped)
