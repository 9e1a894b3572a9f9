from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from strata_plot.config import DEFAULT_ATTRS, ChartAttrs
from strata_plot.errors import PlotDataError
from strata_plot.series import STACK_MODES, ChartData, Ordered, Point, Series


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


def normalize_chart_data(payload: Mapping[str, Any], attrs: ChartAttrs = DEFAULT_ATTRS) -> ChartData:
    """Build `ChartData` from the dashboard payload.

    `payload` carries `series`, `ordered` and `mode`; point values are read with
    the attrs' `x_value` / `y_value` accessors.
    """

    if not isinstance(payload, Mapping):
        raise PlotDataError("chart payload must be a mapping")

    raw_series = payload.get("series")
    if raw_series is None:
        raise PlotDataError("chart payload requires `series`")
    if not isinstance(raw_series, Sequence) or isinstance(raw_series, (str, bytes, bytearray)):
        raise PlotDataError("`series` must be a list of {label, values}")

    mode = payload.get("mode") or "stack"
    if mode not in STACK_MODES:
        raise PlotDataError(f"unknown stack mode: {mode!r}")

    series = tuple(_normalize_series(item, index=i, attrs=attrs) for i, item in enumerate(raw_series))
    return ChartData(series=series, ordered=normalize_ordered(payload.get("ordered")), mode=mode)


def normalize_ordered(raw: Any) -> Ordered | None:
    if raw is None:
        return None
    if isinstance(raw, Ordered):
        return raw
    if not isinstance(raw, Mapping):
        raise PlotDataError("`ordered` must be a mapping or null")
    return Ordered(date=bool(raw.get("date", False)), min=raw.get("min"), max=raw.get("max"))


def series_from_frame(frame: Any, *, x: str = "x", y: str = "y", label: str | None = "label") -> tuple[Series, ...]:
    """Split a long-format DataFrame into one series per label, in first-seen order."""

    if pd is None:
        raise PlotDataError("pandas is required when building series from a DataFrame")
    if not isinstance(frame, pd.DataFrame):
        raise PlotDataError("`frame` must be a pandas DataFrame")
    for column in (x, y) + ((label,) if label is not None else ()):
        if column not in frame.columns:
            raise PlotDataError(f"column not found: {column}")

    if label is None:
        groups = [(str(y), frame)]
    else:
        groups = [(str(key), group) for key, group in frame.groupby(label, sort=False)]

    out: list[Series] = []
    for name, group in groups:
        ys = _coerce_1d_numeric(group[y].to_numpy(), label=f"{name}.y")
        points = tuple(Point(x=_unbox(xv), y=float(yv)) for xv, yv in zip(group[x].tolist(), ys.tolist(), strict=True))
        out.append(Series(label=name, values=points))
    return tuple(out)


def _normalize_series(item: Any, *, index: int, attrs: ChartAttrs) -> Series:
    if isinstance(item, Series):
        return item
    if not isinstance(item, Mapping):
        raise PlotDataError(f"series at index {index} must be a mapping with `label` and `values`")
    label = item.get("label")
    if label is None:
        label = str(index)
    values = item.get("values")
    if values is None or not isinstance(values, Sequence) or isinstance(values, (str, bytes, bytearray)):
        raise PlotDataError(f"series {label!r} requires a list of `values`")

    xs: list[Any] = []
    raw_ys: list[Any] = []
    for i, d in enumerate(values):
        try:
            xs.append(_unbox(attrs.x_value(d)))
            raw_ys.append(attrs.y_value(d))
        except (KeyError, AttributeError, TypeError) as exc:
            raise PlotDataError(f"series {label!r} value at index {i} has no readable x/y: {d!r}") from exc

    ys = _coerce_1d_numeric(raw_ys, label=f"{label}.y")
    if not np.all(np.isfinite(ys)):
        raise PlotDataError(f"series {label!r} contains non-finite y values")
    return Series(label=str(label), values=tuple(Point(x=x, y=float(y)) for x, y in zip(xs, ys.tolist(), strict=True)))


def _unbox(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if pd is not None and isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise PlotDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(value, dtype=object), label=label)

    raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None or isinstance(raw, bool):
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}")
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
