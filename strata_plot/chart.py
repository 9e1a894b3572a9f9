from __future__ import annotations

from dataclasses import dataclass
import itertools
import logging
import threading
from typing import Any, Callable, Mapping, Protocol, Sequence

from strata_plot.adapters import normalize_chart_data
from strata_plot.config import ChartAttrs, resolve_attrs
from strata_plot.errors import PlotDataError
from strata_plot.interaction import ChartEvent, EventSink, InteractionController, InteractionState, RangeSelected
from strata_plot.palette import ColorAssigner
from strata_plot.render.base import RenderSurface
from strata_plot.scales import ScaleSet, domain_kind_for, resolve_scales
from strata_plot.series import ChartData, Layer, StackMode
from strata_plot.shapes import AreaShape, ShapeBundle, add_path, emit
from strata_plot.stack import stack_series
from strata_plot.validator import drawable_size, validate


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    generation: int
    data: ChartData
    attrs: ChartAttrs
    layers: tuple[Layer, ...]
    scales: ScaleSet
    bundle: ShapeBundle


class ChartKind(Protocol):
    """Shared surface of point-series chart variants."""

    def draw(self, payload: Mapping[str, Any] | ChartData) -> RenderResult:
        ...

    def add_path(self, layers: Sequence[Layer], scales: ScaleSet, mode: StackMode) -> tuple[AreaShape, ...]:
        ...

    def add_circle_events(self, bundle: ShapeBundle, layers: Sequence[Layer], scales: ScaleSet) -> InteractionController:
        ...


class AreaChart:
    """Layered area chart bound to one render surface.

    `draw` runs validate, stack, scale, emit and then installs the new bundle and
    its interaction controller together; the previous controller is retired so
    late pointer events against the old geometry are ignored.
    """

    def __init__(self, surface: RenderSurface, *, attrs: Mapping[str, Any] | None = None) -> None:
        self.surface = surface
        self._base_attrs = dict(attrs or {})
        self._colors = ColorAssigner()
        self._clip_ids = itertools.count()
        self._generations = itertools.count(1)
        self._listeners: list[EventSink] = []
        self._lock = threading.RLock()
        self._current: RenderResult | None = None
        self._controller: InteractionController | None = None
        self._attrs: ChartAttrs = resolve_attrs(self._base_attrs)

    @property
    def current(self) -> RenderResult | None:
        return self._current

    @property
    def controller(self) -> InteractionController | None:
        return self._controller

    def subscribe(self, listener: EventSink) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def render(self, payload: Mapping[str, Any] | ChartData) -> RenderResult:
        return self.draw(payload)

    def draw(self, payload: Mapping[str, Any] | ChartData) -> RenderResult:
        attrs, data = self._resolve(payload)
        validate(data.series, self.surface.width, self.surface.height, attrs.margin)
        width, height = drawable_size(self.surface.width, self.surface.height, attrs.margin)

        self._colors.set_overrides(attrs.colors)
        self._colors.assign(s.label for s in data.series)
        layers = stack_series(data.series, data.mode)
        kind = domain_kind_for(data.ordered, attrs.x_scale)
        scales = resolve_scales(layers, kind, width, height, data.mode, ordered=data.ordered)

        generation = next(self._generations)
        self._attrs = attrs
        bundle = emit(
            layers,
            scales,
            data.mode,
            colors=self._colors,
            default_opacity=attrs.default_opacity,
            clip_id=f"chart-area{next(self._clip_ids)}",
            margin=attrs.margin,
            ordered=data.ordered,
        )
        result = RenderResult(generation=generation, data=data, attrs=attrs, layers=layers, scales=scales, bundle=bundle)
        controller = self.add_circle_events(bundle, layers, scales, generation=generation)
        self._install(result, controller)
        LOGGER.debug(
            "rendered area chart generation=%d mode=%s layers=%d markers=%d",
            generation,
            data.mode,
            len(layers),
            len(bundle.points),
        )
        return result

    def add_path(self, layers: Sequence[Layer], scales: ScaleSet, mode: StackMode) -> tuple[AreaShape, ...]:
        return add_path(
            layers,
            scales,
            overlap=mode == "overlap",
            colors=self._colors,
            default_opacity=self._attrs.default_opacity,
        )

    def add_circle_events(
        self,
        bundle: ShapeBundle,
        layers: Sequence[Layer],
        scales: ScaleSet,
        *,
        generation: int = 0,
    ) -> InteractionController:
        return InteractionController(
            bundle,
            layers,
            scales,
            emit=self._emit,
            add_tooltip=self._attrs.add_tooltip,
            brushable=self._attrs.brushable,
            generation=generation,
        )

    def color_for(self, label: str) -> str:
        return self._colors(label)

    def state(self) -> InteractionState:
        with self._lock:
            if self._controller is None:
                return InteractionState()
            return self._controller.snapshot()

    def on_hover(self, marker_id: str) -> None:
        self._handle(lambda c: c.on_hover(marker_id))

    def on_leave(self, marker_id: str) -> None:
        self._handle(lambda c: c.on_leave(marker_id))

    def on_click(self, marker_id: str) -> None:
        self._handle(lambda c: c.on_click(marker_id), refresh=False)

    def on_brush(self, pixel_range: tuple[float, float]) -> tuple[RangeSelected, ...]:
        return self._handle(lambda c: c.on_brush(pixel_range)) or ()

    def on_mouseout(self) -> None:
        self._handle(lambda c: c.on_mouseout())

    def destroy(self) -> None:
        with self._lock:
            if self._controller is not None:
                self._controller.retire()
            self._controller = None
            self._current = None
            self.surface.clear()

    def _resolve(self, payload: Mapping[str, Any] | ChartData) -> tuple[ChartAttrs, ChartData]:
        if isinstance(payload, ChartData):
            return resolve_attrs(self._base_attrs), payload
        if not isinstance(payload, Mapping):
            raise PlotDataError("chart payload must be a mapping or ChartData")
        merged = dict(self._base_attrs)
        merged.update(payload.get("attrs") or {})
        attrs = resolve_attrs(merged)
        return attrs, normalize_chart_data(payload, attrs)

    def _install(self, result: RenderResult, controller: InteractionController) -> None:
        with self._lock:
            previous = self._controller
            if previous is not None:
                previous.retire()
            self.surface.mount(self.surface.width, self.surface.height)
            self.surface.display(result.bundle, controller.snapshot())
            self._current = result
            self._controller = controller

    def _handle(self, action: Callable[[InteractionController], Any], *, refresh: bool = True) -> Any:
        controller = self._controller
        if controller is None:
            return None
        out = action(controller)
        # Style-only refresh; skipped if a newer render replaced this controller meanwhile.
        with self._lock:
            if refresh and controller is self._controller and not controller.retired and self._current is not None:
                self.surface.display(self._current.bundle, controller.snapshot())
        return out

    def _emit(self, event: ChartEvent) -> None:
        for listener in tuple(self._listeners):
            listener(event)


CHART_KINDS: dict[str, type[AreaChart]] = {"area": AreaChart}


def create_chart(kind: str, surface: RenderSurface, *, attrs: Mapping[str, Any] | None = None) -> ChartKind:
    try:
        chart_cls = CHART_KINDS[kind]
    except KeyError as exc:
        raise PlotDataError(f"unknown chart kind: {kind!r}") from exc
    return chart_cls(surface, attrs=attrs)
