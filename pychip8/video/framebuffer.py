"""Packed monochrome framebuffer with XOR sprite drawing.

The 64x32 display is stored as 256 bytes, eight horizontal pixels per byte,
row-major. Bit 7 of byte 0 is the leftmost pixel of the top row.
"""

from __future__ import annotations

from typing import Iterable

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
BYTES_PER_ROW = SCREEN_WIDTH // 8
FRAMEBUFFER_BYTES = BYTES_PER_ROW * SCREEN_HEIGHT
MAX_SPRITE_ROWS = 15


class Framebuffer:
    """64x32 one-bit display memory."""

    def __init__(self, *, wrap: bool = False) -> None:
        self.wrap = wrap
        self.dirty = False
        self._data = bytearray(FRAMEBUFFER_BYTES)

    def clear(self) -> None:
        self._data[:] = bytes(FRAMEBUFFER_BYTES)
        self.dirty = True

    def draw_sprite(self, sprite: Iterable[int], x: int, y: int) -> bool:
        """XOR ``sprite`` rows onto the display at (``x``, ``y``).

        Rows wrap vertically. Pixels pushed past the right edge are clipped
        unless the framebuffer was created with ``wrap=True``, in which case
        they reappear in column 0 of the same row.

        Returns ``True`` when any pixel that was set has been cleared.
        """

        x %= SCREEN_WIDTH
        y %= SCREEN_HEIGHT
        column, offset = divmod(x, 8)
        collision = False

        for row, value in enumerate(sprite):
            if row >= MAX_SPRITE_ROWS:
                break
            value &= 0xFF
            base = ((y + row) % SCREEN_HEIGHT) * BYTES_PER_ROW
            if self._xor(base + column, value >> offset):
                collision = True
            if offset == 0:
                continue
            spill = (value << (8 - offset)) & 0xFF
            if column + 1 < BYTES_PER_ROW:
                if self._xor(base + column + 1, spill):
                    collision = True
            elif self.wrap:
                if self._xor(base, spill):
                    collision = True

        self.dirty = True
        return collision

    def get_pixel(self, x: int, y: int) -> bool:
        value = self._data[(y % SCREEN_HEIGHT) * BYTES_PER_ROW + (x % SCREEN_WIDTH) // 8]
        return bool(value & (0x80 >> (x % 8)))

    def row(self, y: int) -> bytes:
        base = (y % SCREEN_HEIGHT) * BYTES_PER_ROW
        return bytes(self._data[base : base + BYTES_PER_ROW])

    def snapshot(self) -> bytes:
        return bytes(self._data)

    def _xor(self, index: int, bits: int) -> bool:
        # Collision is per bit: a set pixel meets a set sprite bit.
        before = self._data[index]
        self._data[index] = before ^ bits
        return (before & bits) != 0
