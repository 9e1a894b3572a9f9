from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
import logging
import math
from pathlib import Path

from PIL import Image

from strata_plot import STACK_MODE_CHOICES, AreaChart, RasterSurface, SvgSurface


def build_demo_payload(mode: str = "stack", *, points: int = 24) -> dict:
    start = datetime(2024, 3, 1, tzinfo=timezone.utc)
    stamps = [start + timedelta(hours=h) for h in range(points)]
    series = []
    for i, label in enumerate(("200", "404", "500")):
        values = []
        for h, stamp in enumerate(stamps):
            wave = math.sin((h + i * 3) / 4.0)
            values.append({"x": stamp, "y": max(0.0, round((3 - i) * 10 + 8 * wave, 2))})
        series.append({"label": label, "values": values})
    return {
        "series": series,
        "ordered": {"date": True, "min": stamps[2], "max": stamps[-3]},
        "mode": mode,
        "attrs": {
            "margin": {"top": 20, "bottom": 20, "left": 10, "right": 10},
            "addTooltip": True,
            "isBrushable": True,
        },
    }


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a stacked area chart to SVG and PNG.")
    parser.add_argument("--mode", default="stack", choices=STACK_MODE_CHOICES)
    parser.add_argument("--width", type=int, default=960)
    parser.add_argument("--height", type=int, default=400)
    parser.add_argument("--out-dir", default="out/area_chart_demo")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    payload = build_demo_payload(args.mode)

    svg = SvgSurface(width=args.width, height=args.height)
    svg_chart = AreaChart(svg)
    result = svg_chart.render(payload)
    svg_chart.on_hover(result.bundle.points[len(result.bundle.points) // 2].marker_id)
    svg_path = out_dir / f"area_{args.mode}.svg"
    svg_path.write_text(svg.markup, encoding="utf-8")

    raster = RasterSurface(width=args.width, height=args.height)
    AreaChart(raster).render(payload)
    png_path = out_dir / f"area_{args.mode}.png"
    assert raster.canvas is not None
    Image.fromarray(raster.canvas).save(png_path)

    print(svg_path)
    print(png_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
