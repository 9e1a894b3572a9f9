from dataclasses import dataclass
from decimal import Decimal
import unittest

import numpy as np

from strata_plot.adapters.normalize import normalize_chart_data, normalize_ordered, series_from_frame
from strata_plot.config import DEFAULT_ATTRS, Margin, resolve_attrs
from strata_plot.errors import PlotDataError
from strata_plot.series import Ordered

try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None


@dataclass
class Bucket:
    key: str
    count: int


class ResolveAttrsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        attrs = resolve_attrs()
        self.assertEqual(attrs.default_opacity, 0.6)
        self.assertFalse(attrs.add_tooltip)
        self.assertFalse(attrs.brushable)
        self.assertEqual(attrs.x_value({"x": 1, "y": 2}), 1)
        self.assertEqual(attrs.y_value({"x": 1, "y": 2}), 2)
        self.assertEqual(attrs, DEFAULT_ATTRS)

    def test_payload_camel_case_keys(self) -> None:
        attrs = resolve_attrs({"defaultOpacity": 0.3, "addTooltip": True, "isBrushable": True, "xScale": "log"})
        self.assertEqual(attrs.default_opacity, 0.3)
        self.assertTrue(attrs.add_tooltip)
        self.assertTrue(attrs.brushable)
        self.assertEqual(attrs.x_scale, "log")

    def test_partial_margin_merges_with_defaults(self) -> None:
        attrs = resolve_attrs({"margin": {"top": 4}})
        self.assertEqual(attrs.margin, Margin(top=4.0, bottom=10.0, left=0.0, right=0.0))

    def test_invalid_values_are_rejected(self) -> None:
        for overrides in (
            {"unknown": 1},
            {"defaultOpacity": 1.5},
            {"defaultOpacity": True},
            {"xValue": "x"},
            {"colors": {"a": "red"}},
            {"xScale": "sqrt"},
            {"margin": {"top": -1}},
            {"margin": {"middle": 1}},
            {"margin": 5},
        ):
            with self.assertRaises(PlotDataError, msg=str(overrides)):
                resolve_attrs(overrides)

    def test_attrs_are_immutable(self) -> None:
        with self.assertRaises(AttributeError):
            DEFAULT_ATTRS.default_opacity = 1.0  # type: ignore[misc]


class NormalizeTests(unittest.TestCase):
    def test_payload_becomes_chart_data(self) -> None:
        data = normalize_chart_data(
            {
                "series": [{"label": "a", "values": [{"x": 0, "y": Decimal("1.5")}, {"x": 1, "y": np.int64(2)}]}],
                "ordered": {"date": False},
                "mode": "overlap",
            }
        )
        self.assertEqual(data.mode, "overlap")
        self.assertEqual(data.ordered, Ordered(date=False))
        self.assertEqual([p.y for p in data.series[0].values], [1.5, 2.0])
        self.assertFalse(data.is_time_series)

    def test_custom_accessors(self) -> None:
        attrs = resolve_attrs({"xValue": lambda d: d.key, "yValue": lambda d: d.count})
        data = normalize_chart_data({"series": [{"label": "b", "values": [Bucket("k1", 3), Bucket("k2", 4)]}]}, attrs)
        self.assertEqual([(p.x, p.y) for p in data.series[0].values], [("k1", 3.0), ("k2", 4.0)])
        self.assertEqual(data.mode, "stack")

    def test_numpy_x_values_are_unboxed(self) -> None:
        data = normalize_chart_data({"series": [{"label": "a", "values": [{"x": np.float64(1.0), "y": 1}]}]})
        self.assertIs(type(data.series[0].values[0].x), float)

    def test_missing_label_falls_back_to_index(self) -> None:
        data = normalize_chart_data({"series": [{"values": [{"x": 0, "y": 1}]}]})
        self.assertEqual(data.series[0].label, "0")

    def test_malformed_payloads_are_rejected(self) -> None:
        for payload in (
            [],
            {},
            {"series": "abc"},
            {"series": [{"label": "a"}]},
            {"series": [{"label": "a", "values": [{"x": 0}]}]},
            {"series": [{"label": "a", "values": [{"x": 0, "y": "many"}]}]},
            {"series": [{"label": "a", "values": [{"x": 0, "y": None}]}]},
            {"series": [{"label": "a", "values": [{"x": 0, "y": float("inf")}]}]},
            {"series": [], "mode": "expand"},
            {"series": [], "ordered": "date"},
        ):
            with self.assertRaises(PlotDataError, msg=repr(payload)):
                normalize_chart_data(payload)  # type: ignore[arg-type]

    def test_ordered_bounds(self) -> None:
        ordered = normalize_ordered({"date": True, "min": 10, "max": 20})
        self.assertEqual(ordered, Ordered(date=True, min=10, max=20))
        self.assertIsNone(normalize_ordered(None))

    @unittest.skipIf(pd is None, "pandas not installed")
    def test_series_from_long_frame(self) -> None:
        frame = pd.DataFrame(
            {
                "bucket": [0, 1, 0, 1],
                "count": [1, 2, 3, 4],
                "agent": ["ios", "ios", "web", "web"],
            }
        )
        series = series_from_frame(frame, x="bucket", y="count", label="agent")
        self.assertEqual([s.label for s in series], ["ios", "web"])
        self.assertEqual([(p.x, p.y) for p in series[1].values], [(0, 3.0), (1, 4.0)])

    @unittest.skipIf(pd is None, "pandas not installed")
    def test_series_from_frame_requires_columns(self) -> None:
        frame = pd.DataFrame({"x": [0, 1], "y": [1, 2]})
        with self.assertRaises(PlotDataError):
            series_from_frame(frame, label="agent")
        single = series_from_frame(frame, label=None)
        self.assertEqual(single[0].label, "y")


if __name__ == "__main__":
    unittest.main()
