import unittest

from strata_plot.palette import SEED_COLORS, ColorAssigner, color_palette, color_to_class, hex_to_rgba


class PaletteTests(unittest.TestCase):
    def test_palette_starts_with_seed_colors(self) -> None:
        self.assertEqual(color_palette(len(SEED_COLORS)), SEED_COLORS)

    def test_palette_extends_past_seeds_without_repeats(self) -> None:
        colors = color_palette(len(SEED_COLORS) * 3)
        self.assertEqual(len(colors), len(SEED_COLORS) * 3)
        self.assertEqual(len(set(colors)), len(colors))

    def test_assigner_is_stable_per_label(self) -> None:
        assign = ColorAssigner()
        first = assign.assign(["a", "b", "c"])
        second = assign.assign(["c", "a", "b", "d"])
        self.assertEqual({k: second[k] for k in "abc"}, first)
        self.assertEqual(second["d"], SEED_COLORS[3])

    def test_overrides_take_precedence(self) -> None:
        assign = ColorAssigner({"a": "#000000"})
        self.assertEqual(assign("a"), "#000000")
        self.assertEqual(assign("b"), SEED_COLORS[0])

    def test_color_class(self) -> None:
        self.assertEqual(color_to_class("#57C17B"), "c57c17b")

    def test_hex_to_rgba(self) -> None:
        self.assertEqual(hex_to_rgba("#ff000080"), (255, 0, 0, 128))
        self.assertEqual(hex_to_rgba("#00ff00", alpha=0.5), (0, 255, 0, 127))


if __name__ == "__main__":
    unittest.main()
