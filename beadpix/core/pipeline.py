import io
import logging
import math
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from ..color.palette import Palette
from ..color.palette_loader import get_default_palette
from ..color.palette_matcher import nearest_color
from ..cv.cell_sampler import iter_regions, region_color
from ..cv.pixel_source import PixelSource
from ..models.pattern import BeadGrid, BeadPattern, PaletteEntry
from .errors import InvalidDimensionError
from .legend import build_legend, count_usage
from .types import RGB

logger = logging.getLogger(__name__)


# =====================================================================
#  Helpers
# =====================================================================


def _validate_grid_size(grid_size) -> int:
    if isinstance(grid_size, bool) or not isinstance(grid_size, (int, np.integer)):
        raise InvalidDimensionError(f"Grid size must be an integer, got {grid_size!r}")
    if grid_size < 1:
        raise InvalidDimensionError(f"Grid size must be at least 1, got {grid_size}")
    return int(grid_size)


def _as_pixel_source(pixel_source: Union[PixelSource, np.ndarray]) -> PixelSource:
    if isinstance(pixel_source, PixelSource):
        return pixel_source
    return PixelSource.from_array(pixel_source)


# =====================================================================
#  IMAGE → BEAD GRID
# =====================================================================


def quantize_grid(source: PixelSource, grid_size: int, palette: Palette) -> BeadGrid:
    """
    Build the bead grid only. Each cell reads its own region of the shared buffer,
    so cells are independent of one another.
    """
    width, height = source.width, source.height
    rgba = source.rgba

    # nearest_color is pure, so identical region colours can share one lookup
    matched: Dict[RGB, PaletteEntry] = {}
    transparent_cells = 0

    rows: List[List[PaletteEntry]] = [[] for _ in range(grid_size)]
    for _gx, gy, region in iter_regions(width, height, grid_size):
        rgb = region_color(rgba, region)
        if rgb is None:
            entry = palette.background
            transparent_cells += 1
        else:
            entry = matched.get(rgb)
            if entry is None:
                entry = nearest_color(rgb, palette)
                matched[rgb] = entry
        rows[gy].append(entry)

    if transparent_cells:
        logger.debug(
            "%d of %d cells had no opaque samples, using background bead %s",
            transparent_cells,
            grid_size * grid_size,
            palette.background.id,
        )

    return BeadGrid(size=grid_size, rows=tuple(tuple(row) for row in rows))


def quantize(
    pixel_source: Union[PixelSource, np.ndarray],
    grid_size: int,
    palette: Optional[Palette] = None,
) -> BeadPattern:
    """
    Main pipeline:
      1) validate grid size and image dimensions
      2) per cell: bounded lattice sampling, opaque mean, nearest bead
      3) reduce the finished grid to usage counts
      4) build the BeadPattern with legend metadata

    Every call returns a new pattern; nothing from a previous run is reused.
    """
    grid_size = _validate_grid_size(grid_size)
    source = _as_pixel_source(pixel_source)
    if source.width == 0 or source.height == 0:
        raise InvalidDimensionError(
            f"Source image must not be empty, got {source.width}x{source.height}"
        )

    if palette is None:
        palette = get_default_palette()

    grid = quantize_grid(source, grid_size, palette)
    usage = count_usage(grid)
    used_entries = [palette.get(code) for code in usage]

    meta: Dict[str, object] = {
        "title": "Bead Pattern",
        "palette_name": palette.name,
        "palette_size": len(used_entries),
        "total_beads": int(sum(usage.values())),
        "grid_size": grid_size,
        "source_width": source.width,
        "source_height": source.height,
    }

    pattern = BeadPattern(grid=grid, usage=usage, palette=used_entries, meta=meta)
    pattern.meta["legend"] = build_legend(pattern, force=True)

    logger.info(
        "Quantized %dx%d image to %dx%d beads using %d of %d colours",
        source.width,
        source.height,
        grid_size,
        grid_size,
        len(used_entries),
        len(palette),
    )
    return pattern


def process_image_to_pattern(
    image: np.ndarray,
    grid_size: int = 32,
    palette: Optional[Palette] = None,
) -> BeadPattern:
    """Convenience wrapper for numpy images (H×W, H×W×3 or H×W×4)."""
    return quantize(PixelSource.from_array(image), grid_size, palette=palette)


# =====================================================================
#  PREVIEW RENDERING
# =====================================================================

MAX_PREVIEW_PX = 700


def _luminance(rgb: RGB) -> float:
    r, g, b = rgb
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def preview_cell_size(grid_size: int, zoom: float = 1) -> int:
    base = max(3, min(24, MAX_PREVIEW_PX // max(grid_size, 1)))
    return max(1, int(math.floor(base * zoom + 0.5)))


def _load_font(size: int):
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default()


def render_preview(
    pattern: Union[dict, BeadPattern],
    zoom: float = 1,
    show_codes: Optional[bool] = None,
) -> bytes:
    """
    Render a PNG preview of the bead grid.

    Bead codes are written into cells once they are at least 10 px wide (unless
    ``show_codes`` forces it), dark text on light beads and white text on dark ones.
    """
    pattern_dict = pattern.to_dict() if hasattr(pattern, "to_dict") else pattern

    cells: List[List[str]] = pattern_dict["grid"]["cells"]
    n = int(pattern_dict["grid"]["size"])
    cell = preview_cell_size(n, zoom)
    if show_codes is None:
        show_codes = cell >= 10

    color_map: Dict[str, Tuple[int, int, int]] = {
        p["id"]: tuple(int(c) for c in p["rgb"]) for p in pattern_dict.get("palette", [])
    }
    fallback = (200, 200, 200)

    colors = np.array(
        [[color_map.get(code, fallback) for code in row] for row in cells],
        dtype=np.uint8,
    ).reshape(n, n, 3)
    img = np.repeat(np.repeat(colors, cell, axis=0), cell, axis=1)

    # draw grid (light + every 10th darker); skipped when cells are too small to read
    if cell >= 4:
        base_grid = (210, 210, 210)
        accent_grid = (120, 120, 120)
        for i in range(n + 1):
            p = i * cell
            if p >= img.shape[0]:
                p = img.shape[0] - 1
            color = accent_grid if i % 10 == 0 else base_grid
            img[:, p] = color
            img[p, :] = color

    pil = Image.fromarray(img)

    if show_codes:
        draw = ImageDraw.Draw(pil)
        font = _load_font(max(5, min(cell - 2, 11)))
        for y, row in enumerate(cells):
            for x, code in enumerate(row):
                rgb = color_map.get(code, fallback)
                fill = (26, 26, 26) if _luminance(rgb) > 0.5 else (255, 255, 255)
                bbox = draw.textbbox((0, 0), code, font=font)
                tw = bbox[2] - bbox[0]
                th = bbox[3] - bbox[1]
                cx = x * cell + cell / 2
                cy = y * cell + cell / 2
                draw.text((cx - tw / 2 - bbox[0], cy - th / 2 - bbox[1]), code, fill=fill, font=font)

    buf = io.BytesIO()
    pil.save(buf, format="PNG")
    return buf.getvalue()


def render_pattern_image(pattern: Union[dict, BeadPattern], with_codes: bool = True) -> bytes:
    """
    Convenience wrapper used by exporters: returns PNG bytes.
    """
    return render_preview(pattern, zoom=1, show_codes=with_codes)
