from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
import math
from numbers import Real
from typing import Any

from strata_plot.shapes import PointMarker


@dataclass(frozen=True)
class TooltipContent:
    label: str
    x_text: str
    y_text: str

    def lines(self) -> tuple[str, ...]:
        return (self.label, f"x: {self.x_text}", f"y: {self.y_text}")


def format_number(value: float) -> str:
    """Up to six decimals with trailing zeros dropped; scientific outside [1e-6, 1e6)."""

    if not math.isfinite(value):
        return str(value)
    magnitude = abs(value)
    if magnitude != 0 and (magnitude >= 1e6 or magnitude < 1e-6):
        return f"{value:.4e}"
    out = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out


def format_value(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Real) and not isinstance(value, bool):
        return format_number(float(value))
    return str(value)


def tooltip_for(marker: PointMarker) -> TooltipContent:
    return TooltipContent(label=marker.label, x_text=format_value(marker.x), y_text=format_value(marker.y))
