from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List

from ..models.pattern import BeadGrid


def _as_dict(pattern) -> Dict[str, Any]:
    if hasattr(pattern, "to_dict"):
        return pattern.to_dict()
    return pattern


def count_usage(grid: BeadGrid) -> Dict[str, int]:
    """
    Reduce a finished grid to bead counts, keyed by bead code.

    Keys appear in first-seen row-major order.
    """
    counts: Counter[str] = Counter()
    for _x, _y, entry in grid.iter_cells():
        counts[entry.id] += 1
    return dict(counts)


def build_legend(pattern, *, force: bool = False) -> List[dict]:
    """Return the shopping list: one row per bead colour, most used first."""

    pattern_dict = _as_dict(pattern)

    meta = pattern_dict.get("meta") or {}
    if not force and meta.get("legend"):
        # Return a copy so callers can safely mutate the result.
        return [dict(entry) for entry in meta["legend"]]

    palette_lookup: Dict[str, dict] = {}
    for entry in pattern_dict.get("palette", []):
        palette_lookup[entry["id"]] = entry

    usage = pattern_dict.get("usage")
    if usage:
        counts: Counter[str] = Counter(usage)
    else:
        counts = Counter()
        for row in (pattern_dict.get("grid") or {}).get("cells", []):
            counts.update(row)

    total = sum(counts.values()) or 1
    legend: List[dict] = []
    for code, count in counts.most_common():
        item = palette_lookup.get(code, {"id": code})
        rgb = item.get("rgb")
        legend.append(
            {
                "code": code,
                "name": item.get("name"),
                "hex": item.get("hex"),
                "rgb": list(rgb) if rgb is not None else None,
                "count": int(count),
                "percent": round(count / total * 100, 2),
            }
        )
    return legend
