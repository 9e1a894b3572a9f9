import unittest

import numpy as np

from strata_plot.errors import PlotDataError
from strata_plot.series import Point, Series
from strata_plot.stack import stack_offsets, stack_series


def _series(label: str, ys: list[float]) -> Series:
    return Series(label=label, values=tuple(Point(x=i, y=float(y)) for i, y in enumerate(ys)))


SAMPLE = (
    _series("a", [1.0, 4.0, 2.0, 0.0]),
    _series("b", [3.0, 1.0, 5.0, 2.0]),
    _series("c", [2.0, 2.0, 0.0, 6.0]),
)


class StackSeriesTests(unittest.TestCase):
    def test_thickness_is_conserved_in_every_mode(self) -> None:
        expected = [sum(s.values[j].y for s in SAMPLE) for j in range(4)]
        for mode in ("stack", "overlap", "wiggle", "silhouette"):
            layers = stack_series(SAMPLE, mode)
            totals = [sum(layer.points[j].y for layer in layers) for j in range(4)]
            self.assertEqual(totals, expected, msg=mode)

    def test_stack_intervals_are_contiguous_in_input_order(self) -> None:
        layers = stack_series(SAMPLE, "stack")
        self.assertEqual([layer.label for layer in layers], ["a", "b", "c"])
        for j in range(4):
            self.assertEqual(layers[0].points[j].y0, 0.0)
            for below, above in zip(layers, layers[1:]):
                self.assertAlmostEqual(below.points[j].top, above.points[j].y0, places=12)

    def test_overlap_anchors_every_layer_at_zero(self) -> None:
        layers = stack_series(SAMPLE, "overlap")
        self.assertTrue(all(p.y0 == 0.0 for layer in layers for p in layer.points))

    def test_streamgraph_modes_keep_layers_contiguous(self) -> None:
        for mode in ("wiggle", "silhouette"):
            layers = stack_series(SAMPLE, mode)
            for j in range(4):
                for below, above in zip(layers, layers[1:]):
                    self.assertAlmostEqual(below.points[j].top, above.points[j].y0, places=9, msg=mode)

    def test_silhouette_centers_each_column_on_the_tallest_one(self) -> None:
        layers = stack_series(SAMPLE, "silhouette")
        totals = [6.0, 7.0, 7.0, 8.0]
        for j, total in enumerate(totals):
            bottom = layers[0].points[j].y0
            top = layers[-1].points[j].top
            self.assertAlmostEqual(bottom, (8.0 - total) / 2.0)
            self.assertAlmostEqual((bottom + top) / 2.0, 4.0)

    def test_wiggle_baseline_is_non_negative_and_touches_zero(self) -> None:
        layers = stack_series(SAMPLE, "wiggle")
        baseline = [layers[0].points[j].y0 for j in range(4)]
        self.assertAlmostEqual(min(baseline), 0.0)
        self.assertTrue(all(b >= -1e-12 for b in baseline))

    def test_wiggle_of_constant_series_is_flat(self) -> None:
        flat = (_series("a", [2.0, 2.0, 2.0]), _series("b", [1.0, 1.0, 1.0]))
        layers = stack_series(flat, "wiggle")
        self.assertEqual([p.y0 for p in layers[0].points], [0.0, 0.0, 0.0])

    def test_wiggle_ignores_all_zero_columns(self) -> None:
        values = np.asarray([[0.0, 0.0, 3.0], [0.0, 0.0, 1.0]])
        offsets = stack_offsets(values, "wiggle")
        self.assertTrue(np.all(np.isfinite(offsets)))

    def test_points_carry_label_and_x(self) -> None:
        layers = stack_series(SAMPLE, "stack")
        self.assertEqual(layers[1].points[2].label, "b")
        self.assertEqual(layers[1].points[2].x, 2)

    def test_empty_series_list_yields_no_layers(self) -> None:
        self.assertEqual(stack_series([], "stack"), ())

    def test_misaligned_series_are_rejected(self) -> None:
        other = Series(label="z", values=(Point(x=0, y=1.0), Point(x=5, y=1.0), Point(x=6, y=1.0), Point(x=7, y=1.0)))
        with self.assertRaises(PlotDataError):
            stack_series((SAMPLE[0], other), "stack")

    def test_unknown_mode_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            stack_series(SAMPLE, "expand")  # type: ignore[arg-type]

    def test_non_finite_values_are_rejected(self) -> None:
        bad = _series("a", [1.0, float("nan")])
        with self.assertRaises(PlotDataError):
            stack_series((bad,), "stack")

    def test_negative_values_accumulate_in_stack_mode(self) -> None:
        layers = stack_series((_series("a", [-2.0, 1.0]), _series("b", [3.0, -4.0])), "stack")
        self.assertEqual(layers[1].points[0].y0, -2.0)
        self.assertEqual(layers[1].points[1].top, -3.0)


if __name__ == "__main__":
    unittest.main()
