import unittest

from strata_plot.config import Margin
from strata_plot.errors import ChartError, ContainerTooSmall, NotEnoughData
from strata_plot.series import Point, Series
from strata_plot.validator import MIN_HEIGHT, MIN_WIDTH, drawable_size, validate


TWO_POINTS = (Series(label="a", values=(Point(x=0, y=5.0), Point(x=1, y=2.0))),)


class ValidatorTests(unittest.TestCase):
    def test_single_point_series_is_not_enough_data(self) -> None:
        series = (Series(label="a", values=(Point(x=0, y=5.0),)),)
        with self.assertRaises(NotEnoughData) as ctx:
            validate(series, 400, 300)
        self.assertIn("more than one data point", str(ctx.exception))

    def test_any_short_series_fails_the_whole_chart(self) -> None:
        series = TWO_POINTS + (Series(label="b", values=()),)
        with self.assertRaises(NotEnoughData):
            validate(series, 400, 300)

    def test_tiny_surface_is_too_small(self) -> None:
        with self.assertRaises(ContainerTooSmall):
            validate(TWO_POINTS, 10, 10, Margin(0, 0, 0, 0))

    def test_margins_count_against_drawable_area(self) -> None:
        margin = Margin(top=10, bottom=10, left=0, right=0)
        with self.assertRaises(ContainerTooSmall):
            validate(TWO_POINTS, 100, 39, margin)
        validate(TWO_POINTS, 100, 40, margin)

    def test_minimum_is_inclusive(self) -> None:
        validate(TWO_POINTS, MIN_WIDTH, MIN_HEIGHT)

    def test_errors_share_a_base_class(self) -> None:
        self.assertTrue(issubclass(NotEnoughData, ChartError))
        self.assertTrue(issubclass(ContainerTooSmall, ChartError))

    def test_drawable_size_subtracts_all_sides(self) -> None:
        self.assertEqual(drawable_size(200, 100, Margin(top=5, bottom=15, left=10, right=20)), (170, 80))


if __name__ == "__main__":
    unittest.main()
