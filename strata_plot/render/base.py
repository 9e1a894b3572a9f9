from __future__ import annotations

from typing import Protocol

from strata_plot.interaction import InteractionState
from strata_plot.shapes import ShapeBundle


class RenderSurface(Protocol):
    """Drawing target for a bundle; `width`/`height` are the container size in pixels."""

    width: float
    height: float

    def mount(self, width: float, height: float) -> None:
        ...

    def display(self, bundle: ShapeBundle, state: InteractionState | None = None) -> None:
        ...

    def clear(self) -> None:
        ...
