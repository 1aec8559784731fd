import csv
import io

from ..core.legend import build_legend


def _as_dict(pattern) -> dict:
    return pattern.to_dict() if hasattr(pattern, "to_dict") else pattern


def export_csv(pattern) -> str:
    """One row per bead cell, row-major."""
    pattern = _as_dict(pattern)
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(["x", "y", "code", "name", "r", "g", "b"])
    palette_lookup = {p["id"]: p for p in pattern.get("palette", [])}
    for y, row in enumerate(pattern["grid"]["cells"]):
        for x, code in enumerate(row):
            entry = palette_lookup.get(code) or {}
            rgb = entry.get("rgb") or ("", "", "")
            writer.writerow([x, y, code, entry.get("name", ""), *rgb])
    return buf.getvalue()


def export_usage_csv(pattern) -> str:
    """Shopping list: bead code, name, colour and how many to buy."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(["code", "name", "hex", "count", "percent"])
    for row in build_legend(_as_dict(pattern)):
        writer.writerow([row["code"], row.get("name") or "", row.get("hex") or "", row["count"], row["percent"]])
    return buf.getvalue()
