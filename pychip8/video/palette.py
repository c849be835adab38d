"""Two-colour palettes for framebuffer rendering."""

from __future__ import annotations

from typing import Mapping, Sequence, Tuple

RGBColor = Tuple[int, int, int]
Palette = Tuple[RGBColor, RGBColor]


MONOCHROME: Palette = ((0, 0, 0), (0xFF, 0xFF, 0xFF))
GREEN_PHOSPHOR: Palette = ((0x0A, 0x14, 0x0A), (0x33, 0xFF, 0x66))
AMBER: Palette = ((0x14, 0x0C, 0x00), (0xFF, 0xB0, 0x00))

PALETTES: Mapping[str, Palette] = {
    "mono": MONOCHROME,
    "green": GREEN_PHOSPHOR,
    "amber": AMBER,
}


def validate_palette(palette: Sequence[RGBColor]) -> Palette:
    """Return ``palette`` as a (background, foreground) pair of byte triples."""

    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (background and foreground)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    background, foreground = (tuple(int(channel) & 0xFF for channel in color) for color in palette)
    return background, foreground  # type: ignore[return-value]


def get_palette(name: str) -> Palette:
    try:
        return PALETTES[name.lower()]
    except KeyError:
        raise ValueError(f"unknown palette '{name}' (choose from {', '.join(sorted(PALETTES))})") from None
