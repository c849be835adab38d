"""Category-based debug logging controlled by ``CHIP8_DEBUG``.

``CHIP8_DEBUG`` holds a comma-separated list drawn from :data:`CATEGORIES`,
or ``all``. Messages are printed as ``[CHIP8][category] message``.
"""

from __future__ import annotations

import os

ENV_VARIABLE = "CHIP8_DEBUG"
CATEGORIES = frozenset({"cpu", "input", "sched", "audio", "display", "trace"})

_enabled: frozenset[str] | None = None


def reload_categories() -> frozenset[str]:
    """Re-read ``CHIP8_DEBUG`` and return the enabled categories."""

    global _enabled
    requested = {part.strip().lower() for part in os.environ.get(ENV_VARIABLE, "").split(",")}
    _enabled = CATEGORIES if "all" in requested else CATEGORIES & requested
    return _enabled


def debug_enabled(category: str) -> bool:
    enabled = _enabled if _enabled is not None else reload_categories()
    return category in enabled


def debug_log(category: str, message: str, *args) -> None:
    if debug_enabled(category):
        print(f"[CHIP8][{category}] {message % args if args else message}")
