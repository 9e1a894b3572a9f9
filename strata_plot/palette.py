from __future__ import annotations

import colorsys
from collections.abc import Mapping
from typing import Iterable


SEED_COLORS: tuple[str, ...] = (
    "#57c17b",
    "#6f87d8",
    "#663db8",
    "#bc52bc",
    "#9e3533",
    "#daa05d",
    "#00a69b",
)

# Lightness shifts applied to the seed palette once it is exhausted.
_LIGHTNESS_SHIFTS = (0.0, 0.15, -0.15, 0.3, -0.3)


def color_palette(count: int) -> tuple[str, ...]:
    if count <= 0:
        return ()
    colors: list[str] = []
    cycle = 0
    while len(colors) < count:
        shift = _LIGHTNESS_SHIFTS[cycle % len(_LIGHTNESS_SHIFTS)]
        for seed in SEED_COLORS:
            colors.append(_shift_lightness(seed, shift))
            if len(colors) == count:
                break
        cycle += 1
    return tuple(colors)


def color_to_class(color: str) -> str:
    return "c" + color.lstrip("#").lower()


def hex_to_rgba(color: str, alpha: float = 1.0) -> tuple[int, int, int, int]:
    value = color.lstrip("#")
    r, g, b = (int(value[i : i + 2], 16) for i in (0, 2, 4))
    a = int(value[6:8], 16) if len(value) == 8 else 255
    return (r, g, b, int(max(0.0, min(1.0, alpha)) * a))


class ColorAssigner:
    """Label to color mapping owned by one chart instance.

    A label keeps its color for the lifetime of the assigner, so re-rendering
    the same labels with different values never reshuffles colors.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._assigned: dict[str, str] = {}
        self._overrides: dict[str, str] = dict(overrides or {})
        self._next_index = 0

    def set_overrides(self, overrides: Mapping[str, str]) -> None:
        self._overrides = dict(overrides)

    def assign(self, labels: Iterable[str]) -> dict[str, str]:
        return {label: self(label) for label in labels}

    def __call__(self, label: str) -> str:
        if label in self._overrides:
            return self._overrides[label]
        color = self._assigned.get(label)
        if color is None:
            color = color_palette(self._next_index + 1)[-1]
            self._assigned[label] = color
            self._next_index += 1
        return color


def _shift_lightness(color: str, shift: float) -> str:
    if shift == 0.0:
        return color
    r, g, b, _ = hex_to_rgba(color)
    h, lightness, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    lightness = max(0.0, min(1.0, lightness + shift))
    r2, g2, b2 = colorsys.hls_to_rgb(h, lightness, s)
    return "#{:02x}{:02x}{:02x}".format(round(r2 * 255), round(g2 * 255), round(b2 * 255))
