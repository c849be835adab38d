"""Raw ROM images: headerless bytes loaded at the program start address."""

from __future__ import annotations

from pathlib import Path

from pychip8.bus import MEMORY_SIZE, Memory
from pychip8.cpu import PROGRAM_START

MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START


class RomFormatError(Exception):
    """Raised when a ROM image cannot be loaded."""


def validate_rom(image: bytes) -> bytes:
    """Return ``image`` as bytes after checking it fits above 0x200."""

    data = bytes(image)
    if len(data) > MAX_ROM_SIZE:
        raise RomFormatError(f"ROM is {len(data)} bytes; at most {MAX_ROM_SIZE} bytes fit above {PROGRAM_START:#05x}")
    return data


def load_rom(image: bytes, memory: Memory, *, start: int = PROGRAM_START) -> int:
    """Copy ``image`` into ``memory`` and return the number of bytes written."""

    data = validate_rom(image)
    memory.load_image(start, data)
    return len(data)


def read_rom(path: Path | str) -> bytes:
    """Read and validate a ROM file; ``OSError`` propagates for I/O failures."""

    return validate_rom(Path(path).read_bytes())


def load_rom_from_path(path: Path | str, memory: Memory) -> int:
    return load_rom(read_rom(path), memory)
