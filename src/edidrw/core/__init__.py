"""EDID validation and transfer procedures."""
