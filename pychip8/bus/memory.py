"""Flat 4 KB memory for the CHIP-8 interpreter.

The address space is 12 bits wide. Every access wraps modulo the memory size,
so there is no unmapped or out-of-range condition during execution; only
bulk image loading can fail.
"""

from __future__ import annotations

MEMORY_SIZE = 0x1000


def _mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit address space."""

    return value % MEMORY_SIZE


class MemoryError(Exception):
    """Raised when an image cannot be placed in memory."""


class Memory:
    """Byte-addressable 4096-byte store, zero-initialised."""

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size != MEMORY_SIZE:
            raise MemoryError(f"memory size must be {MEMORY_SIZE}, got {size}")
        self._data = bytearray(size)

    def __len__(self) -> int:
        return len(self._data)

    def load8(self, address: int) -> int:
        return self._data[_mask12(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[_mask12(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def load_block(self, address: int, length: int) -> bytes:
        """Read ``length`` bytes starting at ``address``, wrapping at 4 KB."""

        return bytes(self.load8(address + offset) for offset in range(length))

    def load_image(self, address: int, data: bytes) -> None:
        """Copy ``data`` verbatim starting at ``address``."""

        start = _mask12(address)
        end = start + len(data)
        if end > len(self._data):
            raise MemoryError(
                f"image of {len(data)} bytes at {start:#05x} exceeds memory end {len(self._data):#06x}"
            )
        self._data[start:end] = data

    def reset(self) -> None:
        self._data[:] = bytes(len(self._data))

    def snapshot(self) -> bytes:
        return bytes(self._data)
