from __future__ import annotations

import math
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from ..core.types import RGB, Region

# Samples with alpha below this are treated as transparent.
OPAQUE_THRESHOLD = 128


def region_bounds(gx: int, gy: int, width: int, height: int, grid_size: int) -> Region:
    """
    Source rectangle ``[sx, ex) × [sy, ey)`` for grid cell ``(gx, gy)``.

    Starts are floored and ends are ceiled, so every source pixel belongs to at least
    one cell even when the image size is not a multiple of ``grid_size``; neighbours
    share at most one pixel column/row.
    """
    block_w = width / grid_size
    block_h = height / grid_size
    sx = int(math.floor(gx * block_w))
    sy = int(math.floor(gy * block_h))
    ex = min(int(math.ceil((gx + 1) * block_w)), width)
    ey = min(int(math.ceil((gy + 1) * block_h)), height)
    return sx, sy, ex, ey


def iter_regions(width: int, height: int, grid_size: int) -> Iterator[Tuple[int, int, Region]]:
    """Yield ``(gx, gy, region)`` in row-major order (rows outer)."""
    for gy in range(grid_size):
        for gx in range(grid_size):
            yield gx, gy, region_bounds(gx, gy, width, height, grid_size)


def sample_lattice(region: Region, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Row and column indices of the bounded sample lattice inside ``region``.

    The step is a third of the rectangle side (at least 1), which gives about four
    samples per axis regardless of region size (five for a 5 px side). Points are
    clamped into the image. A degenerate rectangle falls back to its top-left corner.
    """
    sx, sy, ex, ey = region
    step_x = max(1, (ex - sx) // 3)
    step_y = max(1, (ey - sy) // 3)
    xs = np.arange(sx, ex, step_x)
    ys = np.arange(sy, ey, step_y)
    if xs.size == 0 or ys.size == 0:
        xs = np.array([sx])
        ys = np.array([sy])
    xs = np.clip(xs, 0, width - 1)
    ys = np.clip(ys, 0, height - 1)
    return ys, xs


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def region_color(rgba: np.ndarray, region: Region) -> Optional[RGB]:
    """
    Mean colour of the opaque lattice samples in ``region``.

    Returns ``None`` when no sample reaches the opacity threshold; the caller decides
    which bead a transparent cell becomes.
    """
    height, width = rgba.shape[:2]
    ys, xs = sample_lattice(region, width, height)
    samples = rgba[np.ix_(ys, xs)].reshape(-1, 4).astype(np.int64)

    opaque = samples[samples[:, 3] >= OPAQUE_THRESHOLD]
    count = opaque.shape[0]
    if count == 0:
        return None

    totals = opaque[:, :3].sum(axis=0)
    return (
        _round_half_up(totals[0] / count),
        _round_half_up(totals[1] / count),
        _round_half_up(totals[2] / count),
    )


def split_into_cells_and_average(
    rgba: np.ndarray,
    grid_size: int,
) -> Dict[Tuple[int, int], Optional[RGB]]:
    """
    Split an RGBA buffer into ``grid_size × grid_size`` regions and compute the
    representative colour of each one, keyed by ``(x, y)``. Fully transparent
    regions map to ``None``.
    """
    height, width = rgba.shape[:2]
    colors: Dict[Tuple[int, int], Optional[RGB]] = {}
    for gx, gy, region in iter_regions(width, height, grid_size):
        colors[(gx, gy)] = region_color(rgba, region)
    return colors
