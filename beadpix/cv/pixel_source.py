from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.errors import ImageDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PixelSource:
    """Decoded image as a read-only ``H×W×4`` uint8 RGBA buffer."""

    rgba: np.ndarray

    @property
    def width(self) -> int:
        return int(self.rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self.rgba.shape[0])

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelSource":
        """
        Wrap a numpy image. Grayscale (H×W) and RGB (H×W×3) inputs are expanded to
        RGBA with a fully opaque alpha channel.
        """
        arr = np.asarray(arr)
        if arr.dtype != np.uint8:
            if not np.issubdtype(arr.dtype, np.integer):
                raise ImageDecodeError(f"Unsupported pixel dtype {arr.dtype}")
            if arr.size and (arr.min() < 0 or arr.max() > 255):
                raise ImageDecodeError("Pixel values must lie in [0, 255]")
            arr = arr.astype(np.uint8)

        if arr.ndim == 2:
            arr = np.stack([arr, arr, arr], axis=-1)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ImageDecodeError(f"Expected H×W×3 or H×W×4 pixels, got shape {arr.shape}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)

        rgba = np.ascontiguousarray(arr).copy()
        rgba.setflags(write=False)
        return cls(rgba=rgba)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelSource":
        return cls.from_array(np.array(image.convert("RGBA")))


def decode_image(data: bytes) -> PixelSource:
    """Decode encoded image bytes (PNG, JPEG, GIF, ...) into a pixel source."""
    if not data:
        raise ImageDecodeError("Empty image payload")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return PixelSource.from_image(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Invalid image: {exc}") from exc


def load_image(path: Union[str, Path]) -> PixelSource:
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as exc:
        raise ImageDecodeError(f"Cannot read image {p}: {exc}") from exc
    logger.debug("Loaded %d bytes from %s", len(data), p)
    return decode_image(data)
