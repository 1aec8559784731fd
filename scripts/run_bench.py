from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from beadpix.color.palette_loader import load_palette, load_palette_file  # noqa: E402
from beadpix.core.pipeline import quantize, render_preview  # noqa: E402
from beadpix.cv.pixel_source import load_image  # noqa: E402

logger = logging.getLogger("run_bench")


def run_case(image_path: Path, output_dir: Path, grid_size: int, palette) -> dict:
    source = load_image(image_path)
    start = time.perf_counter()
    pattern = quantize(source, grid_size, palette=palette)
    elapsed_ms = (time.perf_counter() - start) * 1000

    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / f"{image_path.stem}_{grid_size}.png").write_bytes(render_preview(pattern))

    return {
        "case": image_path.name,
        "source": {"width": source.width, "height": source.height},
        "grid_size": grid_size,
        "palette_size": len(pattern.palette),
        "total_beads": pattern.total_beads,
        "usage": pattern.usage,
        "time_ms": round(elapsed_ms, 2),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Quantize a folder of images into bead sheets")
    parser.add_argument("--cases", type=Path, default=Path("data/bench/cases"))
    parser.add_argument("--output", type=Path, default=Path("data/bench/bench.json"))
    parser.add_argument("--results", type=Path, default=Path("data/bench/results"))
    parser.add_argument("--grid-size", type=int, default=32)
    parser.add_argument("--brand", default="MARD", help="Built-in palette name")
    parser.add_argument("--palette-file", type=Path, help="JSON palette overriding --brand")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    palette = load_palette_file(args.palette_file) if args.palette_file else load_palette(args.brand)

    cases = sorted(p for p in args.cases.glob("*.png"))
    results = []
    for path in cases:
        stats = run_case(path, args.results, args.grid_size, palette)
        results.append(stats)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(results, indent=2), encoding="utf-8")
    logger.info("Wrote %d results to %s", len(results), args.output)


if __name__ == "__main__":
    main()
