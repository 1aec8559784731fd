from __future__ import annotations

import numpy as np
import pytest

from beadpix.cv.cell_sampler import (
    iter_regions,
    region_bounds,
    region_color,
    sample_lattice,
    split_into_cells_and_average,
)
from tests.utils import solid_image


@pytest.mark.parametrize(
    "width,height,grid_size",
    [(10, 10, 3), (7, 13, 4), (100, 37, 8), (1, 1, 1), (64, 64, 16)],
)
def test_regions_cover_every_pixel_within_bounds(width, height, grid_size):
    coverage = np.zeros((height, width), dtype=np.int32)
    for _gx, _gy, (sx, sy, ex, ey) in iter_regions(width, height, grid_size):
        assert 0 <= sx < width and 0 <= sy < height
        assert sx < ex <= width and sy < ey <= height
        coverage[sy:ey, sx:ex] += 1
    assert coverage.min() >= 1
    # neighbours overlap by at most one column and one row
    assert coverage.max() <= 4


def test_non_divisible_regions_overlap_by_one_pixel():
    xs = [region_bounds(gx, 0, 10, 10, 3) for gx in range(3)]
    assert [(sx, ex) for sx, _sy, ex, _ey in xs] == [(0, 4), (3, 7), (6, 10)]
    total_width = sum(ex - sx for sx, _sy, ex, _ey in xs)
    assert total_width >= 10


def test_divisible_regions_tile_exactly():
    area = sum((ex - sx) * (ey - sy) for _x, _y, (sx, sy, ex, ey) in iter_regions(12, 8, 4))
    assert area == 12 * 8


def test_regions_are_row_major():
    order = [(gx, gy) for gx, gy, _r in iter_regions(4, 4, 2)]
    assert order == [(0, 0), (1, 0), (0, 1), (1, 1)]


def test_large_region_samples_four_per_axis():
    ys, xs = sample_lattice((0, 0, 100, 100), 100, 100)
    assert xs.tolist() == [0, 33, 66, 99]
    assert ys.tolist() == [0, 33, 66, 99]


def test_five_pixel_side_samples_five_per_axis():
    ys, xs = sample_lattice((0, 0, 5, 5), 5, 5)
    assert xs.tolist() == [0, 1, 2, 3, 4]
    assert ys.tolist() == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("side", range(1, 200))
def test_samples_per_axis_never_exceed_five(side):
    ys, xs = sample_lattice((0, 0, side, side), side, side)
    assert xs.size <= 5 and ys.size <= 5
    if side != 5:
        assert xs.size <= 4


def test_small_region_samples_every_pixel():
    ys, xs = sample_lattice((3, 5, 5, 7), 10, 10)
    assert xs.tolist() == [3, 4]
    assert ys.tolist() == [5, 6]


def test_degenerate_region_falls_back_to_corner():
    ys, xs = sample_lattice((4, 2, 4, 2), 10, 10)
    assert xs.tolist() == [4]
    assert ys.tolist() == [2]


def test_opaque_threshold_is_128():
    img = solid_image(4, 4, (10, 20, 30), alpha=128)
    assert region_color(img, (0, 0, 4, 4)) == (10, 20, 30)
    img[..., 3] = 127
    assert region_color(img, (0, 0, 4, 4)) is None


def test_transparent_samples_are_excluded_from_mean():
    img = solid_image(2, 1, (200, 0, 0))
    img[0, 1] = (0, 0, 200, 0)
    assert region_color(img, (0, 0, 2, 1)) == (200, 0, 0)


def test_mean_rounds_half_up():
    img = solid_image(2, 1, (0, 0, 0))
    img[0, 0, :3] = (1, 2, 5)
    img[0, 1, :3] = (2, 2, 6)
    # means: 1.5, 2.0, 5.5
    assert region_color(img, (0, 0, 2, 1)) == (2, 2, 6)


def test_split_into_cells_and_average_marks_transparent_cells():
    img = solid_image(4, 4, (0, 255, 0))
    img[:2, :2, 3] = 0
    colors = split_into_cells_and_average(img, 2)
    assert set(colors) == {(0, 0), (1, 0), (0, 1), (1, 1)}
    assert colors[(0, 0)] is None
    assert colors[(1, 1)] == (0, 255, 0)


def test_image_smaller_than_grid_is_still_fully_covered():
    coverage = np.zeros((5, 5), dtype=np.int32)
    for _gx, _gy, (sx, sy, ex, ey) in iter_regions(5, 5, 8):
        assert ex <= 5 and ey <= 5 and ex > sx and ey > sy
        coverage[sy:ey, sx:ex] += 1
    assert coverage.min() >= 1
