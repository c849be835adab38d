"""Dual-rate execution loop.

Instructions are paced to a configurable rate while the delay and sound
timers decay at a fixed 60 Hz measured against the wall clock, so changing
one cadence never affects the other.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from pychip8.cpu import Chip8CPU
from pychip8.cpu.opcodes import disassemble
from pychip8.utils import TraceRecorder, debug_enabled, debug_log

TIMER_FREQUENCY = 60
TIMER_PERIOD = 1.0 / TIMER_FREQUENCY
DEFAULT_INSTRUCTION_RATE = 700

SoundCallback = Callable[[bool], None]


class Scheduler:
    """Drive a CPU at ``instruction_rate`` steps per second."""

    def __init__(
        self,
        cpu: Chip8CPU,
        *,
        instruction_rate: int = DEFAULT_INSTRUCTION_RATE,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
        sound_callback: Optional[SoundCallback] = None,
        trace: TraceRecorder | None = None,
    ) -> None:
        self.cpu = cpu
        self._clock = clock
        self._sleep = sleep
        self._sound_callback = sound_callback
        self._trace = trace
        self._running = False
        self._sound_active = False
        self._last_decay: float | None = None
        self._period = 0.0
        self.instruction_rate = instruction_rate

    @property
    def instruction_rate(self) -> int:
        return self._instruction_rate

    @instruction_rate.setter
    def instruction_rate(self, rate: int) -> None:
        if rate <= 0:
            raise ValueError("instruction rate must be positive")
        self._instruction_rate = rate
        self._period = 1.0 / rate

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False

    def run(
        self,
        poll_events: Optional[Callable[[], None]] = None,
        on_frame: Optional[Callable[[], None]] = None,
        *,
        max_steps: int | None = None,
    ) -> int:
        """Loop until :meth:`stop` is called and return the steps executed.

        ``poll_events`` runs before every fetch, so a key wait keeps draining
        host events. ``on_frame`` runs on the 60 Hz timer cadence.
        """

        self._running = True
        self._last_decay = None
        steps = 0
        try:
            while self._running:
                if poll_events is not None:
                    poll_events()
                    if not self._running:
                        break
                frame = self.tick()
                steps += 1
                if frame and on_frame is not None:
                    on_frame()
                if max_steps is not None and steps >= max_steps:
                    break
        finally:
            self._running = False
        return steps

    def tick(self) -> bool:
        """Run one iteration; return ``True`` if the timers decayed."""

        cycle_start = self._clock()
        if self._last_decay is None:
            self._last_decay = cycle_start

        state_before = self.cpu.state.clone() if self._trace is not None else None
        self.cpu.step()
        if self._trace is not None and state_before is not None:
            opcode = self.cpu.last_opcode
            self._trace.record_step(
                state_before,
                opcode,
                mnemonic="" if opcode is None else disassemble(opcode, self.cpu.decode_table),
                waiting=self.cpu.waiting_for_key,
            )

        frame = self._decay_timers()
        self._update_sound()
        self._pace(cycle_start)
        return frame

    def _decay_timers(self) -> bool:
        now = self._clock()
        if self._last_decay is None or now - self._last_decay < TIMER_PERIOD:
            return False
        self.cpu.tick_timers()
        self._last_decay += TIMER_PERIOD
        if now - self._last_decay >= TIMER_PERIOD:
            # Stalled for more than a period; resync instead of bursting.
            if debug_enabled("sched"):
                debug_log("sched", "timer resync lag=%.4f", now - self._last_decay)
            self._last_decay = now
        return True

    def _update_sound(self) -> None:
        active = self.cpu.state.st > 0
        if active == self._sound_active:
            return
        self._sound_active = active
        if debug_enabled("audio"):
            debug_log("audio", "tone=%s", "on" if active else "off")
        if self._sound_callback is not None:
            self._sound_callback(active)

    def _pace(self, cycle_start: float) -> None:
        elapsed = self._clock() - cycle_start
        if elapsed < self._period:
            self._sleep(self._period - elapsed)
