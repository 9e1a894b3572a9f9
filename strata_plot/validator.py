from __future__ import annotations

from typing import Sequence

from strata_plot.config import Margin
from strata_plot.errors import ContainerTooSmall, NotEnoughData
from strata_plot.series import Series

MIN_WIDTH = 20
MIN_HEIGHT = 20

NOT_ENOUGH_DATA_MESSAGE = "Area charts require more than one data point. Try adding an X-Axis Aggregation"


def drawable_size(width: float, height: float, margin: Margin) -> tuple[float, float]:
    return (width - margin.left - margin.right, height - margin.top - margin.bottom)


def check_enough_data(series: Sequence[Series]) -> None:
    if any(len(s.values) < 2 for s in series):
        raise NotEnoughData(NOT_ENOUGH_DATA_MESSAGE)


def check_container_size(width: float, height: float, margin: Margin) -> None:
    drawable_w, drawable_h = drawable_size(width, height, margin)
    if drawable_w < MIN_WIDTH or drawable_h < MIN_HEIGHT:
        raise ContainerTooSmall()


def validate(series: Sequence[Series], surface_width: float, surface_height: float, margin: Margin | None = None) -> None:
    """Fail fast before any geometry is built; data is checked before layout."""

    check_enough_data(series)
    check_container_size(surface_width, surface_height, margin or Margin(0, 0, 0, 0))
