from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal


StackMode = Literal["stack", "overlap", "wiggle", "silhouette"]
STACK_MODES: tuple[str, ...] = ("stack", "overlap", "wiggle", "silhouette")


@dataclass(frozen=True)
class Point:
    x: Any
    y: float


@dataclass(frozen=True)
class Series:
    label: str
    values: tuple[Point, ...]

    def xs(self) -> tuple[Any, ...]:
        return tuple(p.x for p in self.values)


@dataclass(frozen=True)
class LayerPoint:
    x: Any
    y: float
    y0: float
    label: str

    @property
    def top(self) -> float:
        return self.y0 + self.y


@dataclass(frozen=True)
class Layer:
    label: str
    points: tuple[LayerPoint, ...]


@dataclass(frozen=True)
class Ordered:
    """Ordering hints for continuous x values; `min`/`max` are the query bounds."""

    date: bool = False
    min: Any = None
    max: Any = None


@dataclass(frozen=True)
class ChartData:
    series: tuple[Series, ...]
    ordered: Ordered | None = None
    mode: StackMode = "stack"

    @property
    def is_time_series(self) -> bool:
        return self.ordered is not None and self.ordered.date
