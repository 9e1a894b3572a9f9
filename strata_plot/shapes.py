from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, Sequence

from strata_plot.config import Margin
from strata_plot.scales import ScaleSet, to_epoch_ms
from strata_plot.series import Layer, Ordered, StackMode
from strata_plot.palette import color_to_class


CIRCLE_RADIUS = 12
CIRCLE_STROKE_WIDTH = 1
# Keeps markers on the top edge from being clipped.
CLIP_PATH_BUFFER = 5
GUIDE_STROKE = "#ddd"
GUIDE_STROKE_WIDTH = 1

Vertex = tuple[float, float]
GuideKind = Literal["zero-line", "base-line"]


@dataclass(frozen=True)
class AreaShape:
    label: str
    vertices: tuple[Vertex, ...]
    fill: str
    css_class: str
    opacity: float
    overlap: bool = False

    @property
    def top_edge(self) -> tuple[Vertex, ...]:
        return self.vertices[: len(self.vertices) // 2]

    @property
    def bottom_edge(self) -> tuple[Vertex, ...]:
        return self.vertices[len(self.vertices) // 2 :]


@dataclass(frozen=True)
class PointMarker:
    marker_id: str
    label: str
    x: Any
    y: float
    y0: float
    cx: float
    cy: float
    stroke: str
    css_class: str
    radius: float = CIRCLE_RADIUS
    stroke_width: float = CIRCLE_STROKE_WIDTH


@dataclass(frozen=True)
class GuideLine:
    kind: GuideKind
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = GUIDE_STROKE
    stroke_width: float = GUIDE_STROKE_WIDTH


@dataclass(frozen=True)
class ClipRect:
    clip_id: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class EndZone:
    x: float
    width: float
    height: float


@dataclass(frozen=True)
class ShapeBundle:
    """Everything one render draws, in drawable-area coordinates."""

    width: float
    height: float
    margin: Margin
    areas: tuple[AreaShape, ...]
    points: tuple[PointMarker, ...]
    guides: tuple[GuideLine, ...]
    clip: ClipRect
    end_zones: tuple[EndZone, ...] = ()

    def marker(self, marker_id: str) -> PointMarker:
        for point in self.points:
            if point.marker_id == marker_id:
                return point
        raise KeyError(marker_id)

    def guide(self, kind: GuideKind) -> GuideLine | None:
        for guide in self.guides:
            if guide.kind == kind:
                return guide
        return None


def marker_id_for(layer_index: int, point_index: int) -> str:
    return f"m{layer_index}-{point_index}"


def emit(
    layers: Sequence[Layer],
    scales: ScaleSet,
    mode: StackMode,
    *,
    colors: Callable[[str], str],
    default_opacity: float = 0.6,
    clip_id: str = "chart-area",
    margin: Margin | None = None,
    ordered: Ordered | None = None,
) -> ShapeBundle:
    overlap = mode == "overlap"
    return ShapeBundle(
        width=scales.width,
        height=scales.height,
        margin=margin or Margin(0, 0, 0, 0),
        areas=add_path(layers, scales, overlap=overlap, colors=colors, default_opacity=default_opacity),
        points=add_circles(layers, scales, overlap=overlap, colors=colors),
        guides=add_guides(scales),
        clip=add_clip_path(scales.width, scales.height, clip_id),
        end_zones=create_end_zones(scales, ordered),
    )


def add_path(
    layers: Sequence[Layer],
    scales: ScaleSet,
    *,
    overlap: bool,
    colors: Callable[[str], str],
    default_opacity: float,
) -> tuple[AreaShape, ...]:
    areas: list[AreaShape] = []
    y = scales.y
    for layer in layers:
        top: list[Vertex] = []
        bottom: list[Vertex] = []
        for p in layer.points:
            px = scales.x_position(p.x)
            top.append((px, y(p.y) if overlap else y(p.top)))
            bottom.append((px, y(0.0) if overlap else y(p.y0)))
        color = colors(layer.label)
        areas.append(
            AreaShape(
                label=layer.label,
                vertices=tuple(top) + tuple(reversed(bottom)),
                fill=color,
                css_class="color " + color_to_class(color),
                opacity=default_opacity if overlap else 1.0,
                overlap=overlap,
            )
        )
    return tuple(areas)


def add_circles(
    layers: Sequence[Layer],
    scales: ScaleSet,
    *,
    overlap: bool,
    colors: Callable[[str], str],
) -> tuple[PointMarker, ...]:
    markers: list[PointMarker] = []
    for li, layer in enumerate(layers):
        color = colors(layer.label)
        for pi, p in enumerate(layer.points):
            if p.y == 0:
                continue
            markers.append(
                PointMarker(
                    marker_id=marker_id_for(li, pi),
                    label=p.label,
                    x=p.x,
                    y=p.y,
                    y0=p.y0,
                    cx=scales.x_position(p.x),
                    cy=scales.y(p.y) if overlap else scales.y(p.top),
                    stroke=color,
                    css_class=f"{p.label} {color_to_class(color)}",
                )
            )
    return tuple(markers)


def add_clip_path(width: float, height: float, clip_id: str) -> ClipRect:
    # Height grows by the buffer too so the bottom of the chart is not cut off.
    return ClipRect(clip_id=clip_id, x=0.0, y=-float(CLIP_PATH_BUFFER), width=width, height=height + CLIP_PATH_BUFFER)


def add_guides(scales: ScaleSet) -> tuple[GuideLine, ...]:
    guides: list[GuideLine] = []
    if scales.show_zero_line:
        zero = scales.y(0.0)
        guides.append(GuideLine(kind="zero-line", x1=0.0, y1=zero, x2=scales.width, y2=zero))
    guides.append(GuideLine(kind="base-line", x1=0.0, y1=scales.height, x2=scales.width, y2=scales.height))
    return tuple(guides)


def create_end_zones(scales: ScaleSet, ordered: Ordered | None) -> tuple[EndZone, ...]:
    """Shade the parts of a time axis that fall outside the query bounds."""

    if ordered is None or not ordered.date or scales.x.kind != "time":
        return ()
    zones: list[EndZone] = []
    if ordered.min is not None:
        left = min(scales.width, max(0.0, scales.x(to_epoch_ms(ordered.min))))
        if left > 0:
            zones.append(EndZone(x=0.0, width=left, height=scales.height))
    if ordered.max is not None:
        right = min(scales.width, max(0.0, scales.x(to_epoch_ms(ordered.max))))
        if right < scales.width:
            zones.append(EndZone(x=right, width=scales.width - right, height=scales.height))
    return tuple(zones)
