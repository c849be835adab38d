"""CHIP-8 virtual machine interpreter.

The engine lives in ``cpu``, ``bus``, ``video``, ``io`` and ``system``;
``loader`` reads ROM images and ``ui`` hosts the pygame window used by
``run.py``.
"""

from __future__ import annotations

from . import bus, cpu, io, loader, system, ui, utils, video

__version__ = "0.1.0"

__all__: list[str] = [
    "bus",
    "cpu",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
    "video",
]
