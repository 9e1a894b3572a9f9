from __future__ import annotations

from datetime import date, datetime
import unittest

from strata_plot.tooltip import format_number, format_value


class TooltipFormattingTests(unittest.TestCase):
    def test_format_number_trims_fraction_zeros(self) -> None:
        self.assertEqual(format_number(2.5), "2.5")
        self.assertEqual(format_number(30.0), "30")
        self.assertEqual(format_number(-0.0), "0")
        self.assertEqual(format_number(1.0 / 3.0), "0.333333")

    def test_format_number_switches_to_scientific_for_extremes(self) -> None:
        self.assertEqual(format_number(2_500_000.0), "2.5000e+06")
        self.assertEqual(format_number(0.0000001), "1.0000e-07")

    def test_format_value_handles_dates_and_labels(self) -> None:
        self.assertEqual(format_value(datetime(2024, 3, 1, 12, 30)), "2024-03-01 12:30:00")
        self.assertEqual(format_value(date(2024, 3, 1)), "2024-03-01")
        self.assertEqual(format_value(True), "True")
        self.assertEqual(format_value("p"), "p")


if __name__ == "__main__":
    unittest.main()
