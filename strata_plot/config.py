from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
import re
from typing import Any, Callable

from strata_plot.errors import PlotDataError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

Accessor = Callable[[Any], Any]

# Payload keys use the dashboard's camelCase spelling.
_ATTR_ALIASES = {
    "defaultOpacity": "default_opacity",
    "addTooltip": "add_tooltip",
    "isBrushable": "brushable",
    "xValue": "x_value",
    "yValue": "y_value",
    "xScale": "x_scale",
}

X_SCALE_TYPES = ("linear", "log", "time")


def default_x_value(d: Any) -> Any:
    if isinstance(d, Mapping):
        return d["x"]
    return d.x


def default_y_value(d: Any) -> Any:
    if isinstance(d, Mapping):
        return d["y"]
    return d.y


@dataclass(frozen=True)
class Margin:
    top: float = 10.0
    bottom: float = 10.0
    left: float = 0.0
    right: float = 0.0


@dataclass(frozen=True)
class ChartAttrs:
    """Render configuration, resolved once per render and never mutated."""

    margin: Margin = Margin()
    default_opacity: float = 0.6
    add_tooltip: bool = False
    brushable: bool = False
    x_value: Accessor = default_x_value
    y_value: Accessor = default_y_value
    colors: Mapping[str, str] = field(default_factory=dict)
    x_scale: str | None = None


DEFAULT_ATTRS = ChartAttrs()


def resolve_attrs(overrides: Mapping[str, Any] | None = None) -> ChartAttrs:
    """Merge payload attrs over the defaults and validate the result."""

    raw: dict[str, Any] = {f.name: getattr(DEFAULT_ATTRS, f.name) for f in fields(ChartAttrs)}
    if overrides:
        for key, value in overrides.items():
            name = _ATTR_ALIASES.get(key, key)
            if name not in raw:
                raise PlotDataError(f"Unknown chart attribute: {key}")
            if value is None and name not in ("x_scale",):
                continue
            raw[name] = value

    margin = _coerce_margin(raw["margin"])

    opacity = raw["default_opacity"]
    if isinstance(opacity, bool) or not isinstance(opacity, (int, float)) or not 0.0 <= float(opacity) <= 1.0:
        raise PlotDataError("Attribute `default_opacity` must be a number in [0, 1]")

    for key in ("x_value", "y_value"):
        if not callable(raw[key]):
            raise PlotDataError(f"Attribute `{key}` must be callable")

    colors = raw["colors"]
    if not isinstance(colors, Mapping):
        raise PlotDataError("Attribute `colors` must be a mapping of label to hex color")
    for label, color in colors.items():
        if not isinstance(color, str) or not _HEX_COLOR.match(color):
            raise PlotDataError(f"Color override for `{label}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    x_scale = raw["x_scale"]
    if x_scale is not None and x_scale not in X_SCALE_TYPES:
        raise PlotDataError(f"Attribute `x_scale` must be one of {X_SCALE_TYPES}")

    return ChartAttrs(
        margin=margin,
        default_opacity=float(opacity),
        add_tooltip=bool(raw["add_tooltip"]),
        brushable=bool(raw["brushable"]),
        x_value=raw["x_value"],
        y_value=raw["y_value"],
        colors={str(k): str(v) for k, v in colors.items()},
        x_scale=x_scale,
    )


def _coerce_margin(value: Any) -> Margin:
    if isinstance(value, Margin):
        margin = value
    elif isinstance(value, Mapping):
        base = asdict(DEFAULT_ATTRS.margin)
        for key, side in value.items():
            if key not in base:
                raise PlotDataError(f"Unknown margin side: {key}")
            base[key] = side
        try:
            margin = Margin(**{k: float(v) for k, v in base.items()})
        except (TypeError, ValueError) as exc:
            raise PlotDataError("Margin sides must be numeric") from exc
    else:
        raise PlotDataError("Attribute `margin` must be a mapping with top/bottom/left/right")
    if min(margin.top, margin.bottom, margin.left, margin.right) < 0:
        raise PlotDataError("Margin sides must be >= 0")
    return margin
