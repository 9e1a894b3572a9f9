from __future__ import annotations

from dataclasses import dataclass
import xml.etree.ElementTree as ET

from strata_plot.interaction import InteractionState
from strata_plot.shapes import AreaShape, ShapeBundle


SVG_NS = "http://www.w3.org/2000/svg"
END_ZONE_FILL = "#e8e8e8"
TOOLTIP_LINE_HEIGHT = 14.0


def area_opacity(area: AreaShape, state: InteractionState | None) -> float:
    if state is None or state.highlighted is None:
        return area.opacity
    return 1.0 if area.label == state.highlighted else area.opacity


def path_data(area: AreaShape) -> str:
    if not area.vertices:
        return ""
    head, *rest = area.vertices
    parts = [f"M{_num(head[0])},{_num(head[1])}"]
    parts.extend(f"L{_num(x)},{_num(y)}" for x, y in rest)
    parts.append("Z")
    return "".join(parts)


@dataclass
class SvgSurface:
    """Serializes bundles into standalone SVG markup."""

    width: float
    height: float
    markup: str = ""
    _mounted: tuple[float, float] | None = None

    def mount(self, width: float, height: float) -> None:
        self._mounted = (float(width), float(height))
        self.markup = ""

    def clear(self) -> None:
        self._mounted = None
        self.markup = ""

    def display(self, bundle: ShapeBundle, state: InteractionState | None = None) -> None:
        if self._mounted is None:
            raise RuntimeError("surface must be mounted before display")
        self.markup = ET.tostring(self.build(bundle, state), encoding="unicode")

    def build(self, bundle: ShapeBundle, state: InteractionState | None = None) -> ET.Element:
        width, height = self._mounted or (self.width, self.height)
        root = ET.Element(
            "svg",
            {"xmlns": SVG_NS, "width": _num(width), "height": _num(height)},
        )
        chart = ET.SubElement(
            root,
            "g",
            {
                "transform": f"translate({_num(bundle.margin.left)},{_num(bundle.margin.top)})",
                "clip-path": f"url(#{bundle.clip.clip_id})",
            },
        )
        clip_path = ET.SubElement(chart, "clipPath", {"id": bundle.clip.clip_id})
        ET.SubElement(
            clip_path,
            "rect",
            {
                "x": _num(bundle.clip.x),
                "y": _num(bundle.clip.y),
                "width": _num(bundle.clip.width),
                "height": _num(bundle.clip.height),
            },
        )

        for zone in bundle.end_zones:
            ET.SubElement(
                chart,
                "rect",
                {
                    "class": "endzone",
                    "x": _num(zone.x),
                    "y": "0",
                    "width": _num(zone.width),
                    "height": _num(zone.height),
                    "fill": END_ZONE_FILL,
                },
            )

        for i, area in enumerate(bundle.areas):
            layer = ET.SubElement(chart, "g", {"class": f"layer {i}"})
            css_class = area.css_class + (" overlap_area" if area.overlap else "")
            ET.SubElement(
                layer,
                "path",
                {
                    "class": css_class,
                    "d": path_data(area),
                    "fill": area.fill,
                    "fill-opacity": _num(area_opacity(area, state)),
                },
            )

        for guide in bundle.guides:
            ET.SubElement(
                chart,
                "line",
                {
                    "class": guide.kind,
                    "x1": _num(guide.x1),
                    "y1": _num(guide.y1),
                    "x2": _num(guide.x2),
                    "y2": _num(guide.y2),
                    "stroke": guide.stroke,
                    "stroke-width": _num(guide.stroke_width),
                },
            )

        points = ET.SubElement(chart, "g", {"class": "points area"})
        for marker in bundle.points:
            css_class = marker.css_class
            flags = state.markers.get(marker.marker_id) if state is not None else None
            if flags is not None and flags.hovered:
                css_class += " hover"
            if flags is not None and flags.brushed:
                css_class += " brushed"
            ET.SubElement(
                points,
                "circle",
                {
                    "id": marker.marker_id,
                    "class": css_class,
                    "cx": _num(marker.cx),
                    "cy": _num(marker.cy),
                    "r": _num(marker.radius),
                    "fill": "transparent",
                    "stroke": marker.stroke,
                    "stroke-width": _num(marker.stroke_width),
                },
            )

        if state is not None and state.tooltip.visible and state.tooltip.content is not None:
            marker = bundle.marker(state.tooltip.marker_id or "")
            tooltip = ET.SubElement(
                root,
                "g",
                {"class": "vis-tooltip", "transform": f"translate({_num(marker.cx + bundle.margin.left)},{_num(marker.cy + bundle.margin.top)})"},
            )
            for i, line in enumerate(state.tooltip.content.lines()):
                text = ET.SubElement(tooltip, "text", {"x": "0", "y": _num((i + 1) * TOOLTIP_LINE_HEIGHT)})
                text.text = line
        return root


def _num(value: float) -> str:
    out = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out
