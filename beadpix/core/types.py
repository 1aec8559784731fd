"""Common lightweight type aliases used across the pipeline."""

from typing import Tuple

RGB = Tuple[int, int, int]
Region = Tuple[int, int, int, int]  # (sx, sy, ex, ey), end-exclusive

__all__ = ["RGB", "Region"]
