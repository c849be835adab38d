"""CPU package for the CHIP-8 interpreter."""

from .core import (
    PROGRAM_START,
    Chip8CPU,
    CPUError,
    CPUState,
    IllegalOpcodeError,
    StackOverflowError,
    StackUnderflowError,
)
from . import opcodes

__all__ = [
    "PROGRAM_START",
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "opcodes",
]
