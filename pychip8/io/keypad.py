"""Sixteen-key hexadecimal keypad."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


# Host key name (as reported by ``pygame.key.name``) to logical key.
HOST_KEY_TABLE: Mapping[str, int] = {
    "0": 0x0,
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0x4,
    "5": 0x5,
    "6": 0x6,
    "7": 0x7,
    "8": 0x8,
    "9": 0x9,
    "a": 0xA,
    "b": 0xB,
    "c": 0xC,
    "d": 0xD,
    "e": 0xE,
    "f": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[0]": "0",
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
    "[5]": "5",
    "[6]": "6",
    "[7]": "7",
    "[8]": "8",
    "[9]": "9",
}


@dataclass
class Keypad:
    """Logical key state shared between the host and the interpreter."""

    _keys: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)

    def set_key(self, index: int, pressed: bool) -> None:
        self._keys[index % KEY_COUNT] = pressed

    def is_pressed(self, index: int) -> bool:
        return self._keys[index % KEY_COUNT]

    def lowest_pressed(self) -> int | None:
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def handle_host_key(self, key_name: str, pressed: bool) -> None:
        """Apply a host key event.

        An unrecognised key-down releases every key; unrecognised key-ups are
        ignored.
        """

        index = self._lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped key=%s pressed=%s", key_name, pressed)
            if pressed:
                self.reset()
            return
        self._keys[index] = pressed
        if debug_enabled("input"):
            debug_log("input", "key=%X pressed=%s", index, pressed)

    def reset(self) -> None:
        self._keys[:] = [False] * KEY_COUNT

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def _lookup(self, key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return HOST_KEY_TABLE.get(name)
