"""ROM loading for the CHIP-8 interpreter."""

from __future__ import annotations

from .rom import MAX_ROM_SIZE, RomFormatError, load_rom, load_rom_from_path, read_rom, validate_rom

__all__ = [
    "MAX_ROM_SIZE",
    "RomFormatError",
    "load_rom",
    "load_rom_from_path",
    "read_rom",
    "validate_rom",
]
