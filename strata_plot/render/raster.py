from __future__ import annotations

from dataclasses import dataclass, field
import math

import numpy as np
from PIL import Image, ImageDraw

from strata_plot.interaction import InteractionState
from strata_plot.palette import hex_to_rgba
from strata_plot.render.svg import area_opacity
from strata_plot.shapes import ShapeBundle


RGBA = tuple[int, int, int, int]

END_ZONE_COLOR: RGBA = (232, 232, 232, 255)
TOOLTIP_BG: RGBA = (40, 40, 40, 230)
TOOLTIP_TEXT: RGBA = (248, 250, 252, 255)


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = color
    return canvas


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    """Alpha-blend `src` onto `dst` at (x0, y0), cropping whatever falls outside."""

    sx0 = max(0, -x0)
    sy0 = max(0, -y0)
    x0 = max(0, x0)
    y0 = max(0, y0)
    h = src.shape[0] - sy0
    w = src.shape[1] - sx0
    y1 = min(dst.shape[0], y0 + h)
    x1 = min(dst.shape[1], x0 + w)
    if y0 >= y1 or x0 >= x1:
        return

    view = dst[y0:y1, x0:x1]
    patch = src[sy0 : sy0 + (y1 - y0), sx0 : sx0 + (x1 - x0)]
    alpha = patch[:, :, 3:4].astype(np.float32) / 255.0
    inv = 1.0 - alpha
    view[:, :, :3] = (patch[:, :, :3] * alpha + view[:, :, :3] * inv).astype(np.uint8)
    view[:, :, 3] = 255


@dataclass
class RasterSurface:
    """Rasterizes bundles onto an RGBA numpy canvas (rows, columns, 4)."""

    width: int
    height: int
    background: RGBA = (255, 255, 255, 255)
    canvas: np.ndarray | None = field(default=None, repr=False)

    def mount(self, width: float, height: float) -> None:
        self.canvas = new_canvas(max(1, int(math.ceil(width))), max(1, int(math.ceil(height))), self.background)

    def clear(self) -> None:
        self.canvas = None

    def display(self, bundle: ShapeBundle, state: InteractionState | None = None) -> None:
        if self.canvas is None:
            raise RuntimeError("surface must be mounted before display")
        self.canvas[:, :] = self.background

        clip = bundle.clip
        layer_w = max(1, int(math.ceil(clip.width)))
        layer_h = max(1, int(math.ceil(clip.height)))
        # Plot layer covers exactly the clip rect, so anything outside it is dropped.
        plot = Image.new("RGBA", (layer_w, layer_h), (0, 0, 0, 0))

        def to_layer(x: float, y: float) -> tuple[float, float]:
            return (x - clip.x, y - clip.y)

        zones = ImageDraw.Draw(plot)
        for zone in bundle.end_zones:
            x0, y0 = to_layer(zone.x, 0.0)
            x1, y1 = to_layer(zone.x + zone.width, zone.height)
            zones.rectangle((x0, y0, x1, y1), fill=END_ZONE_COLOR)

        for area in bundle.areas:
            if len(area.vertices) < 3:
                continue
            shape = Image.new("RGBA", plot.size, (0, 0, 0, 0))
            ImageDraw.Draw(shape).polygon(
                [to_layer(x, y) for x, y in area.vertices],
                fill=hex_to_rgba(area.fill, area_opacity(area, state)),
            )
            plot = Image.alpha_composite(plot, shape)

        draw = ImageDraw.Draw(plot)
        for marker in bundle.points:
            cx, cy = to_layer(marker.cx, marker.cy)
            r = marker.radius
            flags = state.markers.get(marker.marker_id) if state is not None else None
            width = int(marker.stroke_width) + (1 if flags is not None and flags.hovered else 0)
            draw.ellipse((cx - r, cy - r, cx + r, cy + r), outline=hex_to_rgba(marker.stroke), width=max(1, width))

        ox = int(round(bundle.margin.left + clip.x))
        oy = int(round(bundle.margin.top + clip.y))
        blit(self.canvas, np.asarray(plot, dtype=np.uint8), ox, oy)

        self._draw_guides(bundle)

        if state is not None and state.tooltip.visible and state.tooltip.content is not None:
            self._draw_tooltip(bundle, state)

    def _draw_guides(self, bundle: ShapeBundle) -> None:
        assert self.canvas is not None
        rows, cols = self.canvas.shape[:2]
        overlay = Image.new("RGBA", (cols, rows), (0, 0, 0, 0))
        pen = ImageDraw.Draw(overlay)
        for guide in bundle.guides:
            # Base line sits on the drawable edge; keep it on the last visible row.
            y = min(int(round(bundle.margin.top + guide.y1)), rows - 1)
            x0 = bundle.margin.left + guide.x1
            x1 = bundle.margin.left + guide.x2
            pen.line((x0, y, x1, y), fill=hex_to_rgba(_expand_hex(guide.stroke)), width=max(1, int(guide.stroke_width)))
        blit(self.canvas, np.asarray(overlay, dtype=np.uint8))

    def _draw_tooltip(self, bundle: ShapeBundle, state: InteractionState) -> None:
        assert self.canvas is not None
        marker = bundle.marker(state.tooltip.marker_id or "")
        text = "\n".join(state.tooltip.content.lines())  # type: ignore[union-attr]
        measure = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
        left, top, right, bottom = measure.multiline_textbbox((0, 0), text)
        pad = 4
        box = Image.new("RGBA", (int(right - left) + 2 * pad, int(bottom - top) + 2 * pad), TOOLTIP_BG)
        ImageDraw.Draw(box).multiline_text((pad - left, pad - top), text, fill=TOOLTIP_TEXT)
        x = int(round(bundle.margin.left + marker.cx))
        y = int(round(bundle.margin.top + marker.cy))
        blit(self.canvas, np.asarray(box, dtype=np.uint8), x, y)


def _expand_hex(color: str) -> str:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return "#" + value
