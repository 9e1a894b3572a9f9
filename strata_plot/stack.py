from __future__ import annotations

from typing import Sequence

import numpy as np

from strata_plot.errors import PlotDataError
from strata_plot.series import STACK_MODES, Layer, LayerPoint, Series, StackMode


def stack_series(series: Sequence[Series], mode: StackMode = "stack") -> tuple[Layer, ...]:
    """Turn point-aligned series into layers carrying a baseline `y0` per point.

    Series order is the stacking order: the first series is the bottom layer.
    """

    if mode not in STACK_MODES:
        raise PlotDataError(f"unknown stack mode: {mode!r}")
    if not series:
        return ()

    xs = _shared_xs(series)
    values = _value_matrix(series)
    baselines = stack_offsets(values, mode)

    layers: list[Layer] = []
    for i, s in enumerate(series):
        points = tuple(
            LayerPoint(x=x, y=float(values[i, j]), y0=float(baselines[i, j]), label=s.label)
            for j, x in enumerate(xs)
        )
        layers.append(Layer(label=s.label, points=points))
    return tuple(layers)


def stack_offsets(values: np.ndarray, mode: StackMode) -> np.ndarray:
    """Return the `y0` matrix (layers x positions) for a thickness matrix."""

    if values.ndim != 2:
        raise PlotDataError("stack values must be a 2-D (layers, positions) matrix")
    n, m = values.shape
    if n == 0 or m == 0:
        return np.zeros_like(values, dtype=np.float64)

    if mode == "overlap":
        return np.zeros((n, m), dtype=np.float64)

    # Cumulative thickness below each layer, starting from a zero baseline.
    below = np.vstack([np.zeros((1, m), dtype=np.float64), np.cumsum(values, axis=0)[:-1]])
    if mode == "stack":
        return below
    if mode == "silhouette":
        return below + _silhouette_baseline(values)[np.newaxis, :]
    if mode == "wiggle":
        return below + _wiggle_baseline(values)[np.newaxis, :]
    raise PlotDataError(f"unknown stack mode: {mode!r}")


def _silhouette_baseline(values: np.ndarray) -> np.ndarray:
    totals = values.sum(axis=0)
    return (totals.max() - totals) / 2.0


def _wiggle_baseline(values: np.ndarray) -> np.ndarray:
    n, m = values.shape
    baseline = np.zeros(m, dtype=np.float64)
    if m < 2:
        return baseline

    dy = np.diff(values, axis=1)
    # Slope of each layer's center line: all changes below it plus half its own.
    center_slope = np.cumsum(dy, axis=0) - dy / 2.0
    totals = values[:, 1:].sum(axis=0)
    weighted = (center_slope * values[:, 1:]).sum(axis=0)
    step = np.divide(weighted, totals, out=np.zeros_like(totals), where=totals != 0)
    baseline[1:] = -np.cumsum(step)
    return baseline - baseline.min()


def _shared_xs(series: Sequence[Series]) -> tuple:
    xs = series[0].xs()
    for s in series[1:]:
        if s.xs() != xs:
            raise PlotDataError(f"series {s.label!r} is not aligned with {series[0].label!r} on x values")
    return xs


def _value_matrix(series: Sequence[Series]) -> np.ndarray:
    try:
        values = np.asarray([[float(p.y) for p in s.values] for s in series], dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise PlotDataError("series y values must be numeric") from exc
    if not np.all(np.isfinite(values)):
        raise PlotDataError("series y values must be finite")
    return values
