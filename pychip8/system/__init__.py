"""CHIP-8 system assembly and execution loop."""

from __future__ import annotations

from .machine import Machine, MachineConfig, create_machine
from .scheduler import DEFAULT_INSTRUCTION_RATE, TIMER_FREQUENCY, TIMER_PERIOD, Scheduler

__all__ = [
    "MachineConfig",
    "Machine",
    "create_machine",
    "Scheduler",
    "DEFAULT_INSTRUCTION_RATE",
    "TIMER_FREQUENCY",
    "TIMER_PERIOD",
]
