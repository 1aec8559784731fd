from __future__ import annotations

import base64
import csv
import io
import json

from PIL import Image

from beadpix.core.pipeline import quantize
from beadpix.export import export_csv, export_json, export_pdf, export_png, export_usage_csv
from tests.utils import make_palette, solid_image

PALETTE = make_palette(("W", (255, 255, 255)), ("R", (255, 0, 0)))


def _pattern():
    img = solid_image(4, 2, (255, 0, 0))
    img[:, :2, 3] = 0
    return quantize(img, 2, palette=PALETTE)


def test_export_csv_has_one_row_per_cell():
    rows = list(csv.reader(io.StringIO(export_csv(_pattern()))))
    assert rows[0] == ["x", "y", "code", "name", "r", "g", "b"]
    assert len(rows) == 1 + 4
    assert rows[1][:3] == ["0", "0", "W"]
    assert rows[2][:3] == ["1", "0", "R"]
    assert rows[2][4:] == ["255", "0", "0"]


def test_export_usage_csv_is_shopping_list():
    rows = list(csv.reader(io.StringIO(export_usage_csv(_pattern().to_dict()))))
    assert rows[0] == ["code", "name", "hex", "count", "percent"]
    assert {row[0]: int(row[3]) for row in rows[1:]} == {"W": 2, "R": 2}


def test_export_json_embeds_preview():
    payload = json.loads(export_json(_pattern()))
    assert payload["grid"]["cells"] == [["W", "R"], ["W", "R"]]
    assert payload["usage"] == {"W": 2, "R": 2}
    preview = base64.b64decode(payload["preview_png"])
    assert preview.startswith(b"\x89PNG")


def test_export_png_respects_zoom():
    img = Image.open(io.BytesIO(export_png(_pattern(), zoom=2)))
    assert img.size == (96, 96)


def test_export_pdf_is_pdf():
    pattern = _pattern()
    data = export_pdf(pattern, preview=export_png(pattern))
    assert data.startswith(b"%PDF")
    assert len(data) > 500
