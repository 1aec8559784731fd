from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np

from ..core.errors import EmptyPaletteError
from ..core.types import RGB
from ..models.pattern import PaletteEntry

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def parse_hex(value: str) -> RGB:
    match = _HEX_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid hex colour: {value!r}")
    digits = match.group(1)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def entry_from_record(record: Dict[str, Any]) -> PaletteEntry:
    """Build an entry from a catalogue record.

    Accepts ``id`` or ``code`` for the identifier, ``name`` or ``displayName`` for the
    label and either ``hex``, ``rgb`` or separate ``r``/``g``/``b`` keys for the colour.
    """
    entry_id = record.get("id") or record.get("code")
    if not entry_id:
        raise ValueError(f"Palette record without id: {record!r}")
    name = record.get("name") or record.get("displayName") or ""

    if record.get("rgb") is not None:
        rgb = tuple(int(c) for c in record["rgb"])
    elif record.get("hex"):
        rgb = parse_hex(record["hex"])
    elif all(k in record for k in ("r", "g", "b")):
        rgb = (int(record["r"]), int(record["g"]), int(record["b"]))
    else:
        raise ValueError(f"Palette record {entry_id!r} has no colour")

    return PaletteEntry(id=str(entry_id), name=str(name), rgb=rgb)


class Palette:
    """Immutable, ordered catalogue of bead colours.

    Order matters: the first entry is the background used for transparent regions,
    and equidistant matches resolve to the earlier entry.
    """

    __slots__ = ("name", "_entries", "_index", "_array")

    def __init__(self, entries: Iterable[PaletteEntry], name: str = "custom") -> None:
        items: Tuple[PaletteEntry, ...] = tuple(entries)
        if not items:
            raise EmptyPaletteError("Palette must contain at least one entry")

        index: Dict[str, PaletteEntry] = {}
        for entry in items:
            if entry.id in index:
                raise ValueError(f"Duplicate palette id {entry.id!r}")
            index[entry.id] = entry

        array = np.array([entry.rgb for entry in items], dtype=np.int32)
        array.setflags(write=False)

        self.name = name
        self._entries = items
        self._index = index
        self._array = array

    @classmethod
    def from_records(cls, records: Sequence[Dict[str, Any]], name: str = "custom") -> "Palette":
        return cls((entry_from_record(r) for r in records), name=name)

    def entries(self) -> Tuple[PaletteEntry, ...]:
        return self._entries

    @property
    def first(self) -> PaletteEntry:
        return self._entries[0]

    # transparent regions render as the first registered bead
    background = first

    def get(self, entry_id: str) -> Optional[PaletteEntry]:
        return self._index.get(entry_id)

    def as_array(self) -> np.ndarray:
        """N×3 int32 array of entry colours, read-only."""
        return self._array

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PaletteEntry]:
        return iter(self._entries)

    def __getitem__(self, idx: int) -> PaletteEntry:
        return self._entries[idx]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, PaletteEntry):
            return self._index.get(item.id) == item
        return item in self._index

    def __repr__(self) -> str:
        return f"Palette(name={self.name!r}, size={len(self._entries)})"
