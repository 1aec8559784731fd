from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from ..core.errors import EmptyPaletteError
from ..core.types import RGB
from ..models.pattern import PaletteEntry
from .palette import Palette


def color_distance(rgb_a: RGB, rgb_b: RGB) -> float:
    a = np.array(rgb_a, dtype=float)
    b = np.array(rgb_b, dtype=float)
    return float(np.linalg.norm(a - b))


def nearest_color(rgb: RGB, palette: Union[Palette, Sequence[PaletteEntry]]) -> PaletteEntry:
    """Return the palette entry closest to ``rgb`` in plain RGB space.

    A linear scan over squared integer distances; ``argmin`` picks the first
    minimum, so ties go to the entry listed earlier in the palette.
    """
    if len(palette) == 0:
        raise EmptyPaletteError("Cannot match a colour against an empty palette")

    if isinstance(palette, Palette):
        arr = palette.as_array()
    else:
        arr = np.array([entry.rgb for entry in palette], dtype=np.int32)

    diff = arr - np.asarray(rgb, dtype=np.int32)
    dist = np.einsum("ij,ij->i", diff, diff)
    return palette[int(np.argmin(dist))]


nearest = nearest_color
