from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
import math
from typing import Any, Literal, Sequence, Union

import numpy as np

from strata_plot.errors import PlotDataError
from strata_plot.series import Layer, Ordered, StackMode


DomainKind = Literal["ordinal", "linear", "log", "time"]
CONTINUOUS_KINDS = ("linear", "log", "time")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_ms(value: Any) -> float:
    """Time scale input: datetimes, dates, numpy datetime64 or epoch milliseconds."""

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - _EPOCH).total_seconds() * 1000.0
    if isinstance(value, date):
        return to_epoch_ms(datetime(value.year, value.month, value.day))
    if isinstance(value, np.datetime64):
        return float(value.astype("datetime64[ms]").astype(np.int64))
    if isinstance(value, bool):
        raise PlotDataError(f"time scale cannot map {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"time scale cannot map {value!r}") from exc


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]
    kind: DomainKind = "linear"

    @property
    def bandwidth(self) -> float:
        return 0.0

    def _forward(self, value: Any) -> float:
        if self.kind == "time":
            return to_epoch_ms(value)
        try:
            v = float(value)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{self.kind} scale cannot map {value!r}") from exc
        if self.kind == "log":
            if v <= 0:
                raise PlotDataError(f"log scale requires positive values, got {value!r}")
            return math.log10(v)
        return v

    def _backward(self, t: float) -> Any:
        if self.kind == "log":
            return 10.0**t
        return t

    def __call__(self, value: Any) -> float:
        d0, d1 = (self._forward(v) for v in self.domain)
        r0, r1 = self.range
        t = self._forward(value)
        return r0 + (t - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> Any:
        d0, d1 = (self._forward(v) for v in self.domain)
        r0, r1 = self.range
        return self._backward(d0 + (float(pixel) - r0) / (r1 - r0) * (d1 - d0))


@dataclass(frozen=True)
class BandScale:
    """Ordinal scale; each value owns an equal slice of the range."""

    domain: tuple[Any, ...]
    range: tuple[float, float]
    kind: DomainKind = "ordinal"

    @property
    def bandwidth(self) -> float:
        if not self.domain:
            return 0.0
        return (self.range[1] - self.range[0]) / len(self.domain)

    def __call__(self, value: Any) -> float:
        try:
            index = self.domain.index(value)
        except ValueError as exc:
            raise PlotDataError(f"value {value!r} is not in the ordinal domain") from exc
        return self.range[0] + index * self.bandwidth


XScale = Union[LinearScale, BandScale]


@dataclass(frozen=True)
class ScaleSet:
    x: XScale
    y: LinearScale
    x_offset: float
    show_zero_line: bool
    width: float
    height: float

    @property
    def y_min(self) -> float:
        return self.y.domain[0]

    def x_position(self, value: Any) -> float:
        return self.x(value) + self.x_offset


def domain_kind_for(ordered: Ordered | None, x_scale: str | None = None) -> DomainKind:
    if x_scale is not None:
        return x_scale  # type: ignore[return-value]
    if ordered is None:
        return "ordinal"
    if ordered.date:
        return "time"
    return "linear"


def resolve_scales(
    layers: Sequence[Layer],
    domain_kind: DomainKind,
    surface_width: float,
    surface_height: float,
    mode: StackMode = "stack",
    *,
    ordered: Ordered | None = None,
) -> ScaleSet:
    """Derive the x/y mappings for a drawable area of the given size.

    Pixel y grows downward, so the y range runs from the bottom edge to 0.
    """

    xs = tuple(p.x for p in layers[0].points) if layers else ()
    if domain_kind == "ordinal":
        x: XScale = BandScale(domain=tuple(xs), range=(0.0, float(surface_width)))
    elif domain_kind in CONTINUOUS_KINDS:
        x = LinearScale(domain=_continuous_domain(xs, domain_kind, ordered), range=(0.0, float(surface_width)), kind=domain_kind)
    else:
        raise PlotDataError(f"unknown x domain kind: {domain_kind!r}")

    y_min, y_max = _y_extent(layers, mode)
    y = LinearScale(domain=(y_min, y_max), range=(float(surface_height), 0.0))

    is_time_series = domain_kind == "time" or (ordered is not None and ordered.date)
    x_offset = 0.0 if is_time_series else x.bandwidth / 2.0
    show_zero_line = y_min < 0 and mode not in ("wiggle", "silhouette")
    return ScaleSet(
        x=x,
        y=y,
        x_offset=x_offset,
        show_zero_line=show_zero_line,
        width=float(surface_width),
        height=float(surface_height),
    )


def _continuous_domain(xs: Sequence[Any], kind: DomainKind, ordered: Ordered | None) -> tuple[Any, Any]:
    unit = LinearScale(domain=(0.0, 1.0), range=(0.0, 1.0), kind=kind)
    values = [unit._forward(v) for v in xs]
    if kind == "time" and ordered is not None:
        values.extend(to_epoch_ms(b) for b in (ordered.min, ordered.max) if b is not None)
    if not values:
        return (0.0, 1.0) if kind != "log" else (1.0, 10.0)
    lo = min(values)
    hi = max(values)
    if lo == hi:
        lo -= 1.0
        hi += 1.0
    if kind == "log":
        return (10.0**lo, 10.0**hi)
    return (lo, hi)


def _y_extent(layers: Sequence[Layer], mode: StackMode) -> tuple[float, float]:
    lows = [0.0]
    highs: list[float] = []
    for layer in layers:
        for p in layer.points:
            bottom = 0.0 if mode == "overlap" else p.y0
            top = p.y if mode == "overlap" else p.top
            lows.append(min(bottom, top))
            highs.append(max(bottom, top))
    ymin = min(lows)
    ymax = max(highs) if highs else 0.0
    if ymax <= ymin:
        ymax = ymin + 1.0
    return (ymin, ymax)
