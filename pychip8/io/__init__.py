"""Input handling for the CHIP-8 interpreter."""

from .keypad import HOST_KEY_TABLE, KEY_COUNT, Keypad

__all__ = [
    "HOST_KEY_TABLE",
    "KEY_COUNT",
    "Keypad",
]
