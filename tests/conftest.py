"""Pytest configuration and shared fixtures."""

import pytest
import structlog

from edidrw.models.edid import EDID_SIGNATURE, EDID_SIZE


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any logging configuration a CLI invocation installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def sample_edid() -> bytes:
    """A 256-byte blob with a valid header and a recognisable body."""
    body = bytes((i * 7 + 3) & 0xFF for i in range(len(EDID_SIGNATURE), EDID_SIZE))
    return EDID_SIGNATURE + body


@pytest.fixture
def sample_hex(sample_edid: bytes) -> str:
    """sample_edid as hex text wrapped at 32 digits, like a typical dump file."""
    digits = sample_edid.hex().upper()
    return "\n".join(digits[i:i + 32] for i in range(0, len(digits), 32)) + "\n"
