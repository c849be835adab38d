"""Convert the packed framebuffer into RGB pixels for presentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .framebuffer import BYTES_PER_ROW, FRAMEBUFFER_BYTES, SCREEN_HEIGHT, SCREEN_WIDTH
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """RGB image produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Expand 1-bit framebuffer rows into scaled RGB scanlines."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        background, foreground = validate_palette(palette)
        self._background = bytes(background)
        self._foreground = bytes(foreground)

    def render(self, framebuffer: bytes, *, scale: int = 1) -> RenderResult:
        if len(framebuffer) != FRAMEBUFFER_BYTES:
            raise ValueError(f"framebuffer must be {FRAMEBUFFER_BYTES} bytes, got {len(framebuffer)}")
        if scale <= 0:
            raise ValueError("scale must be positive")

        width = SCREEN_WIDTH * scale
        height = SCREEN_HEIGHT * scale
        pixels = bytearray()
        for y in range(SCREEN_HEIGHT):
            line = bytearray()
            base = y * BYTES_PER_ROW
            for value in framebuffer[base : base + BYTES_PER_ROW]:
                for bit in range(7, -1, -1):
                    color = self._foreground if (value >> bit) & 1 else self._background
                    line += color * scale
            pixels += bytes(line) * scale
        return RenderResult(width=width, height=height, pixels=pixels)
