"""edidrw - read and write display EDID EEPROMs over I2C."""

__version__ = "0.1.0"
