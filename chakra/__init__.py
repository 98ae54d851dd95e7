"""Chakra overlay geometry, layout and export for floor-plan images."""

__version__ = "0.1.0"
