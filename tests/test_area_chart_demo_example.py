from __future__ import annotations

import unittest

from examples.area.area_chart_demo import build_demo_payload
from strata_plot import AreaChart, RasterSurface, SvgSurface


class AreaChartDemoExampleTests(unittest.TestCase):
    def test_demo_payload_renders_every_mode(self) -> None:
        for mode in ("stack", "overlap", "wiggle", "silhouette"):
            with self.subTest(mode=mode):
                surface = SvgSurface(width=640, height=320)
                result = AreaChart(surface).render(build_demo_payload(mode))
                self.assertEqual(result.data.mode, mode)
                self.assertEqual(len(result.bundle.areas), 3)
                self.assertTrue(result.data.is_time_series)
                self.assertIn("<svg", surface.markup)

    def test_demo_payload_has_end_zones_from_ordered_bounds(self) -> None:
        result = AreaChart(SvgSurface(width=640, height=320)).render(build_demo_payload())
        self.assertEqual(len(result.bundle.end_zones), 2)

    def test_demo_payload_rasterizes(self) -> None:
        surface = RasterSurface(width=320, height=200)
        AreaChart(surface).render(build_demo_payload(points=8))
        assert surface.canvas is not None
        self.assertEqual(surface.canvas.shape, (200, 320, 4))


if __name__ == "__main__":
    unittest.main()
