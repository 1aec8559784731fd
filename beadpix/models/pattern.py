from __future__ import annotations

from typing import Annotated, Any, Dict, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

Channel = Annotated[int, Field(ge=0, le=255)]


class PaletteEntry(BaseModel):
    """One purchasable bead colour. Identity is ``id`` (the bead code)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    rgb: Tuple[Channel, Channel, Channel]

    @property
    def hex(self) -> str:
        r, g, b = self.rgb
        return f"#{r:02X}{g:02X}{b:02X}"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "rgb": list(self.rgb), "hex": self.hex}


class BeadGrid(BaseModel):
    """Square grid of bead cells, ``rows[y][x]``."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(ge=1)
    rows: Tuple[Tuple[PaletteEntry, ...], ...]

    @model_validator(mode="after")
    def _check_square(self) -> "BeadGrid":
        if len(self.rows) != self.size:
            raise ValueError(f"expected {self.size} rows, got {len(self.rows)}")
        for y, row in enumerate(self.rows):
            if len(row) != self.size:
                raise ValueError(f"row {y} has {len(row)} cells, expected {self.size}")
        return self

    def cell(self, x: int, y: int) -> PaletteEntry:
        return self.rows[y][x]

    def iter_cells(self) -> Iterator[Tuple[int, int, PaletteEntry]]:
        for y, row in enumerate(self.rows):
            for x, entry in enumerate(row):
                yield x, y, entry

    def codes(self) -> List[List[str]]:
        return [[entry.id for entry in row] for row in self.rows]


class BeadPattern(BaseModel):
    grid: BeadGrid
    usage: Dict[str, int]
    palette: List[PaletteEntry]
    meta: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_usage(self) -> "BeadPattern":
        total = sum(self.usage.values())
        if total != self.grid.size * self.grid.size:
            raise ValueError(f"usage counts sum to {total}, grid holds {self.grid.size ** 2} cells")
        return self

    @property
    def total_beads(self) -> int:
        return sum(self.usage.values())

    def to_dict(self) -> Dict[str, Any]:
        """Compact JSON-friendly form: cells are stored as bead codes."""
        return {
            "grid": {"size": self.grid.size, "cells": self.grid.codes()},
            "palette": [entry.to_dict() for entry in self.palette],
            "usage": dict(self.usage),
            "meta": dict(self.meta),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BeadPattern":
        palette = [
            PaletteEntry(id=p["id"], name=p.get("name") or "", rgb=tuple(p["rgb"]))
            for p in data.get("palette", [])
        ]
        lookup = {entry.id: entry for entry in palette}
        grid_data = data["grid"]
        rows = tuple(tuple(lookup[code] for code in row) for row in grid_data["cells"])
        return cls(
            grid=BeadGrid(size=int(grid_data["size"]), rows=rows),
            usage={str(k): int(v) for k, v in data.get("usage", {}).items()},
            palette=palette,
            meta=dict(data.get("meta") or {}),
        )
