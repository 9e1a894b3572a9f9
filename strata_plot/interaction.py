from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Sequence, Union

from strata_plot.scales import BandScale, ScaleSet
from strata_plot.series import Layer, LayerPoint
from strata_plot.shapes import PointMarker, ShapeBundle, marker_id_for
from strata_plot.tooltip import TooltipContent, tooltip_for


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointClicked:
    label: str
    x: Any
    y: float


@dataclass(frozen=True)
class HoverChanged:
    label: str
    x: Any
    y: float
    active: bool


@dataclass(frozen=True)
class RangeSelected:
    label: str
    points: tuple[LayerPoint, ...]
    x_range: tuple[Any, Any]


ChartEvent = Union[PointClicked, HoverChanged, RangeSelected]
EventSink = Callable[[ChartEvent], None]


@dataclass
class MarkerState:
    hovered: bool = False
    brushed: bool = False
    clicked: bool = False


@dataclass(frozen=True)
class TooltipState:
    visible: bool = False
    marker_id: str | None = None
    content: TooltipContent | None = None


@dataclass(frozen=True)
class InteractionState:
    """Point-in-time copy of the controller's flags."""

    markers: dict[str, MarkerState] = field(default_factory=dict)
    tooltip: TooltipState = TooltipState()
    highlighted: str | None = None

    def hovered(self) -> tuple[str, ...]:
        return tuple(marker_id for marker_id, s in self.markers.items() if s.hovered)

    def brushed(self) -> tuple[str, ...]:
        return tuple(marker_id for marker_id, s in self.markers.items() if s.brushed)


class InteractionController:
    """Pointer affordances for one installed bundle.

    Markers are `idle` or `hovered`; `clicked` is a pulse that only holds while
    a click is being dispatched. Once retired, handlers do nothing and events
    still queued by an in-flight handler are dropped.
    """

    def __init__(
        self,
        bundle: ShapeBundle,
        layers: Sequence[Layer],
        scales: ScaleSet,
        *,
        emit: EventSink,
        add_tooltip: bool = False,
        brushable: bool = False,
        generation: int = 0,
    ) -> None:
        self.bundle = bundle
        self.layers = tuple(layers)
        self.scales = scales
        self.add_tooltip = add_tooltip
        self.brushable = brushable
        self.generation = generation
        self._emit = emit
        self._markers: dict[str, MarkerState] = {p.marker_id: MarkerState() for p in bundle.points}
        self._tooltip = TooltipState()
        self._highlighted: str | None = None
        # Hovered marker ids, most recent last.
        self._hover_order: list[str] = []
        self._retired = False

    @property
    def retired(self) -> bool:
        return self._retired

    def retire(self) -> None:
        self._retired = True

    def snapshot(self) -> InteractionState:
        return InteractionState(
            markers={
                marker_id: MarkerState(hovered=s.hovered, brushed=s.brushed, clicked=s.clicked)
                for marker_id, s in self._markers.items()
            },
            tooltip=self._tooltip,
            highlighted=self._highlighted,
        )

    def area_opacity(self, label: str) -> float:
        area = next((a for a in self.bundle.areas if a.label == label), None)
        base = area.opacity if area is not None else 1.0
        if self._highlighted is None:
            return base
        return 1.0 if label == self._highlighted else base

    def on_hover(self, marker_id: str) -> None:
        if self._is_stale("hover"):
            return
        marker = self.bundle.marker(marker_id)
        state = self._markers[marker_id]
        if state.hovered:
            return
        state.hovered = True
        self._hover_order.append(marker_id)
        self._highlighted = marker.label
        if self.add_tooltip:
            self._tooltip = TooltipState(visible=True, marker_id=marker_id, content=tooltip_for(marker))
        self._dispatch(HoverChanged(label=marker.label, x=marker.x, y=marker.y, active=True))

    def on_leave(self, marker_id: str) -> None:
        if self._is_stale("leave"):
            return
        marker = self.bundle.marker(marker_id)
        state = self._markers[marker_id]
        if not state.hovered:
            return
        state.hovered = False
        self._hover_order.remove(marker_id)
        self._settle_hover()
        self._dispatch(HoverChanged(label=marker.label, x=marker.x, y=marker.y, active=False))

    def on_click(self, marker_id: str) -> None:
        if self._is_stale("click"):
            return
        marker = self.bundle.marker(marker_id)
        state = self._markers[marker_id]
        state.clicked = True
        try:
            self._dispatch(PointClicked(label=marker.label, x=marker.x, y=marker.y))
        finally:
            state.clicked = False

    def on_brush(self, pixel_range: tuple[float, float]) -> tuple[RangeSelected, ...]:
        """Select every point whose x falls under the dragged pixel range."""

        if not self.brushable or self._is_stale("brush"):
            return ()
        lo, hi = sorted((float(pixel_range[0]), float(pixel_range[1])))

        for state in self._markers.values():
            state.brushed = False

        events: list[RangeSelected] = []
        for li, layer in enumerate(self.layers):
            selected = [
                (pi, p) for pi, p in enumerate(layer.points) if self._x_in_range(p.x, lo, hi)
            ]
            if not selected:
                continue
            for pi, _ in selected:
                state = self._markers.get(marker_id_for(li, pi))
                if state is not None:
                    state.brushed = True
            events.append(
                RangeSelected(
                    label=layer.label,
                    points=tuple(p for _, p in selected),
                    x_range=self._x_range(lo, hi, selected),
                )
            )

        for event in events:
            self._dispatch(event)
        return tuple(events)

    def on_mouseout(self) -> None:
        if self._is_stale("mouseout"):
            return
        released: list[PointMarker] = []
        for marker_id, state in self._markers.items():
            if state.hovered:
                state.hovered = False
                released.append(self.bundle.marker(marker_id))
        self._hover_order.clear()
        self._tooltip = TooltipState()
        self._highlighted = None
        for marker in released:
            self._dispatch(HoverChanged(label=marker.label, x=marker.x, y=marker.y, active=False))

    def _settle_hover(self) -> None:
        """Hand highlight and tooltip back to the most recently hovered marker left."""

        if not self._hover_order:
            self._tooltip = TooltipState()
            self._highlighted = None
            return
        marker = self.bundle.marker(self._hover_order[-1])
        self._highlighted = marker.label
        if self.add_tooltip and self._tooltip.marker_id != marker.marker_id:
            self._tooltip = TooltipState(visible=True, marker_id=marker.marker_id, content=tooltip_for(marker))

    def _x_in_range(self, x: Any, lo: float, hi: float) -> bool:
        return lo <= self.scales.x_position(x) <= hi

    def _x_range(self, lo: float, hi: float, selected: list[tuple[int, LayerPoint]]) -> tuple[Any, Any]:
        if isinstance(self.scales.x, BandScale):
            return (selected[0][1].x, selected[-1][1].x)
        offset = self.scales.x_offset
        return (self.scales.x.invert(lo - offset), self.scales.x.invert(hi - offset))

    def _is_stale(self, handler: str) -> bool:
        if self._retired:
            LOGGER.debug("ignoring %s on retired interaction generation %d", handler, self.generation)
        return self._retired

    def _dispatch(self, event: ChartEvent) -> None:
        if self._retired:
            LOGGER.debug("dropping %s from retired interaction generation %d", type(event).__name__, self.generation)
            return
        self._emit(event)
