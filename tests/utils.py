from __future__ import annotations

import io
from typing import Sequence, Tuple

import numpy as np
from PIL import Image

from beadpix.color.palette import Palette


def make_palette(*colors: Tuple[str, Tuple[int, int, int]]) -> Palette:
    return Palette.from_records([{"id": code, "name": code, "rgb": rgb} for code, rgb in colors])


def solid_image(
    width: int,
    height: int,
    rgb: Sequence[int],
    alpha: int = 255,
) -> np.ndarray:
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[..., :3] = rgb
    img[..., 3] = alpha
    return img


def make_checker_image(
    cols: int,
    rows: int,
    cell: int = 10,
    colors: Sequence[Tuple[int, int, int]] = ((230, 57, 70), (30, 144, 255)),
) -> np.ndarray:
    """RGBA image made of ``cols × rows`` solid blocks alternating between colours."""
    img = np.zeros((rows * cell, cols * cell, 4), dtype=np.uint8)
    img[..., 3] = 255
    for y in range(rows):
        for x in range(cols):
            color = colors[(x + y) % len(colors)]
            img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :3] = color
    return img


def png_bytes(arr: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG")
    return buf.getvalue()
