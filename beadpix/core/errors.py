"""Error types raised by the bead pipeline."""

from __future__ import annotations


class BeadPixError(Exception):
    """Base class for every error raised by beadpix."""


class ImageDecodeError(BeadPixError, ValueError):
    """The source image could not be read or decoded into pixels."""


class InvalidDimensionError(BeadPixError, ValueError):
    """Grid size below 1 or a zero-sized source image."""


class EmptyPaletteError(BeadPixError, RuntimeError):
    """A palette without entries reached the matcher. Configuration bug, not user input."""


class StylizeError(BeadPixError):
    """The remote stylization service failed or returned no image."""


__all__ = [
    "BeadPixError",
    "ImageDecodeError",
    "InvalidDimensionError",
    "EmptyPaletteError",
    "StylizeError",
]
