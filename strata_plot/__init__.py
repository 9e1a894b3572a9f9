from strata_plot.adapters import normalize_chart_data, series_from_frame
from strata_plot.chart import CHART_KINDS, AreaChart, ChartKind, RenderResult, create_chart
from strata_plot.config import ChartAttrs, Margin, resolve_attrs
from strata_plot.errors import ChartError, ContainerTooSmall, NotEnoughData, PlotDataError
from strata_plot.interaction import (
    HoverChanged,
    InteractionController,
    InteractionState,
    PointClicked,
    RangeSelected,
)
from strata_plot.render import RasterSurface, RenderSurface, SvgSurface
from strata_plot.scales import resolve_scales
from strata_plot.series import STACK_MODES as STACK_MODE_CHOICES
from strata_plot.series import ChartData, Layer, LayerPoint, Ordered, Point, Series, StackMode
from strata_plot.shapes import ShapeBundle, emit
from strata_plot.stack import stack_series
from strata_plot.validator import validate

__all__ = [
    "AreaChart",
    "CHART_KINDS",
    "ChartAttrs",
    "ChartData",
    "ChartError",
    "ChartKind",
    "ContainerTooSmall",
    "HoverChanged",
    "InteractionController",
    "InteractionState",
    "Layer",
    "LayerPoint",
    "Margin",
    "NotEnoughData",
    "Ordered",
    "PlotDataError",
    "Point",
    "PointClicked",
    "RangeSelected",
    "RasterSurface",
    "RenderResult",
    "RenderSurface",
    "Series",
    "ShapeBundle",
    "StackMode",
    "STACK_MODE_CHOICES",
    "SvgSurface",
    "create_chart",
    "emit",
    "normalize_chart_data",
    "resolve_attrs",
    "resolve_scales",
    "series_from_frame",
    "stack_series",
    "validate",
]
