from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Union

from .. import settings
from .palette import Palette

logger = logging.getLogger(__name__)

# MARD/COCO style catalogue of purchasable bead colours.
# White stays first: it is the background bead for transparent regions.
MARD = [
    # white / black
    {"code": "M01", "name": "Pure White", "hex": "#FFFFFF"},
    {"code": "M02", "name": "Pure Black", "hex": "#000000"},
    # yellows
    {"code": "E02", "name": "Cream Yellow", "hex": "#FFF8DC"},
    {"code": "D03", "name": "Golden Yellow", "hex": "#FFD700"},
    {"code": "K09", "name": "Apricot", "hex": "#FFB347"},
    # blues
    {"code": "G01", "name": "Sky Blue", "hex": "#87CEEB"},
    {"code": "H23", "name": "Dodger Blue", "hex": "#1E90FF"},
    {"code": "H31", "name": "Dark Blue", "hex": "#00008B"},
    # reds
    {"code": "K08", "name": "Bright Red", "hex": "#E63946"},
    {"code": "C01", "name": "Dark Red", "hex": "#8B0000"},
    {"code": "K33", "name": "Magenta", "hex": "#C71585"},
    # greens
    {"code": "F05", "name": "Light Green", "hex": "#90EE90"},
    {"code": "G03", "name": "Lime Green", "hex": "#32CD32"},
    {"code": "G08", "name": "Forest Green", "hex": "#228B22"},
    # purples
    {"code": "J07", "name": "Lavender", "hex": "#E6E6FA"},
    {"code": "J14", "name": "Medium Purple", "hex": "#9370DB"},
    {"code": "J17", "name": "Indigo", "hex": "#4B0082"},
    # skin tones
    {"code": "K03", "name": "Peach", "hex": "#FFE4C4"},
    {"code": "K24", "name": "Nude", "hex": "#DEB887"},
    {"code": "K30", "name": "Rosy Brown", "hex": "#BC8F8F"},
    # browns
    {"code": "Z02", "name": "Wheat", "hex": "#F5DEB3"},
    {"code": "Z15", "name": "Saddle Brown", "hex": "#8B4513"},
    {"code": "Z19", "name": "Dark Brown", "hex": "#3E2723"},
    # greys
    {"code": "A05", "name": "Light Grey", "hex": "#F5F5F5"},
    {"code": "B08", "name": "Medium Grey", "hex": "#808080"},
    {"code": "B11", "name": "Dark Grey", "hex": "#404040"},
    # dark tones
    {"code": "Y01", "name": "Slate Green", "hex": "#2F4F4F"},
    {"code": "Y06", "name": "Dark Green", "hex": "#2E7D32"},
    # oranges
    {"code": "F01", "name": "Dark Orange", "hex": "#FF8C00"},
    {"code": "K05", "name": "Light Salmon", "hex": "#FFA07A"},
    # pinks
    {"code": "C02", "name": "Pink", "hex": "#FFB6C1"},
    {"code": "K12", "name": "Hot Pink", "hex": "#FF69B4"},
]

GRAYSCALE = [
    {"code": "M01", "name": "Pure White", "hex": "#FFFFFF"},
    {"code": "A05", "name": "Light Grey", "hex": "#F5F5F5"},
    {"code": "B08", "name": "Medium Grey", "hex": "#808080"},
    {"code": "B11", "name": "Dark Grey", "hex": "#404040"},
    {"code": "M02", "name": "Pure Black", "hex": "#000000"},
]

CATALOGUES = {
    "MARD": MARD,
    "GRAYSCALE": GRAYSCALE,
}


@lru_cache(maxsize=None)
def load_palette(brand: str = "MARD") -> Palette:
    records = CATALOGUES.get(brand.upper())
    if records is None:
        # auto / unknown -> default MARD
        if brand.lower() != "auto":
            logger.warning("Unknown palette brand %r, falling back to MARD", brand)
        return load_palette("MARD")
    return Palette.from_records(records, name=brand.upper())


def load_palette_file(path: Union[str, Path]) -> Palette:
    """Load a catalogue from a JSON list of ``{id|code, name, hex|rgb}`` records."""
    p = Path(path)
    payload = json.loads(p.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("entries") or payload.get("palette") or []
    return Palette.from_records(payload, name=p.stem)


def get_default_palette() -> Palette:
    if settings.PALETTE_FILE:
        return load_palette_file(settings.PALETTE_FILE)
    return load_palette(settings.PALETTE_BRAND)
