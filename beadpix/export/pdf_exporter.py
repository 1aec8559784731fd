import io
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from PIL import Image, UnidentifiedImageError
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from ..core.legend import build_legend

logger = logging.getLogger(__name__)

FONT_CANDIDATES = [
    Path("assets/fonts/DejaVuSans.ttf"),
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/usr/local/share/fonts/DejaVuSans.ttf"),
]
FONT_NAME = "DejaVuSans"


def _ensure_font() -> str:
    try:
        pdfmetrics.getFont(FONT_NAME)
        return FONT_NAME
    except KeyError:
        pass

    for candidate in FONT_CANDIDATES:
        if candidate.exists():
            try:
                pdfmetrics.registerFont(TTFont(FONT_NAME, str(candidate)))
                return FONT_NAME
            except Exception as exc:  # fallback to built-in fonts if file is broken
                logger.warning("Failed to register font %s: %s", candidate, exc)
                continue
    return "Helvetica"


def _hex_to_rgb01(value: Optional[str]):
    if not value:
        return (1.0, 1.0, 1.0)
    value = value.lstrip("#")
    return tuple(int(value[i : i + 2], 16) / 255.0 for i in (0, 2, 4))


def export_pdf(pattern, preview: Optional[bytes] = None) -> bytes:
    """
    Printable bead sheet: grid preview on the left, shopping list on the right,
    totals at the bottom.

    pattern: BeadPattern or its ``to_dict()`` form.
    preview: optional PNG bytes with rendered grid preview.
    """
    pattern_dict: Dict[str, Any] = pattern.to_dict() if hasattr(pattern, "to_dict") else pattern
    meta = pattern_dict.get("meta") or {}

    buffer = io.BytesIO()

    # horizontal A4
    page_w, page_h = landscape(A4)
    c = canvas.Canvas(buffer, pagesize=(page_w, page_h))

    # -----------------------------------------------------------------
    # 1) Title
    # -----------------------------------------------------------------
    title = meta.get("title") or "Bead Pattern"
    font_name = _ensure_font()
    c.setFont(font_name, 20)
    c.drawString(20 * mm, page_h - 20 * mm, title)

    # -----------------------------------------------------------------
    # 2) Preview image (if provided)
    # -----------------------------------------------------------------
    preview_block_w = page_w * 0.65
    preview_block_h = page_h - 50 * mm
    preview_top_y = page_h - 30 * mm
    preview_left_x = 20 * mm

    if preview:
        try:
            img = Image.open(io.BytesIO(preview))
            img_w, img_h = img.size

            scale = min(preview_block_w / img_w, preview_block_h / img_h, 1.0)
            c.drawImage(
                ImageReader(img),
                preview_left_x,
                preview_top_y - img_h * scale,
                width=img_w * scale,
                height=img_h * scale,
                preserveAspectRatio=True,
                anchor="sw",
            )
        except (UnidentifiedImageError, OSError) as exc:
            logger.warning("PDF preview insert failed: %s", exc)

    # -----------------------------------------------------------------
    # 3) Shopping list
    # -----------------------------------------------------------------
    legend = build_legend(pattern_dict)
    c.setFont(font_name, 11)

    legend_x = page_w * 0.7
    legend_y = page_h - 30 * mm
    c.drawString(legend_x, legend_y + 10, "Beads:")

    for entry in legend:
        legend_y -= 14
        if legend_y < 15 * mm:
            c.showPage()
            legend_y = page_h - 20 * mm
            c.setFont(font_name, 11)
        c.setFillColorRGB(*_hex_to_rgb01(entry.get("hex")))
        c.rect(legend_x, legend_y - 2, 10, 10, stroke=1, fill=1)
        c.setFillColorRGB(0, 0, 0)
        name = entry.get("name") or ""
        c.drawString(legend_x + 16, legend_y, f"{entry['code']} {name} × {entry['count']}")

    # -----------------------------------------------------------------
    # 4) Grid information / meta
    # -----------------------------------------------------------------
    size = pattern_dict.get("grid", {}).get("size", 0)
    total_beads = meta.get("total_beads") or sum(row["count"] for row in legend)
    c.setFont(font_name, 10)
    c.drawString(
        20 * mm,
        20 * mm,
        f"Grid: {size} × {size} beads · Colours: {len(legend)} · Total beads: {total_beads}",
    )

    c.showPage()
    c.save()

    return buffer.getvalue()
