"""Built-in hexadecimal digit glyphs."""

from __future__ import annotations

from pychip8.bus import Memory

FONT_ADDRESS = 0x000
GLYPH_BYTES = 5
GLYPH_COUNT = 16

# Each glyph is 4 pixels wide; the low nibble of every row is blank.
FONT_SET = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)


def glyph_address(digit: int) -> int:
    """Return the address of the glyph for ``digit`` (0-F)."""

    return FONT_ADDRESS + (digit & 0x0F) * GLYPH_BYTES


def load_font(memory: Memory) -> None:
    """Write the 16 digit glyphs into ``memory`` at :data:`FONT_ADDRESS`."""

    memory.load_image(FONT_ADDRESS, FONT_SET)
