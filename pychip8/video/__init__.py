"""Display helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONT_ADDRESS, FONT_SET, GLYPH_BYTES, glyph_address, load_font
from .framebuffer import FRAMEBUFFER_BYTES, SCREEN_HEIGHT, SCREEN_WIDTH, Framebuffer
from .palette import MONOCHROME, PALETTES, get_palette, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Framebuffer",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PALETTES",
    "get_palette",
    "validate_palette",
    "FONT_ADDRESS",
    "FONT_SET",
    "GLYPH_BYTES",
    "glyph_address",
    "load_font",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "FRAMEBUFFER_BYTES",
]
