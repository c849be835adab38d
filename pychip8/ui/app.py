"""Pygame front end for the CHIP-8 interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.cpu import CPUError
from pychip8.loader import RomFormatError, read_rom
from pychip8.system import DEFAULT_INSTRUCTION_RATE, Machine, MachineConfig, Scheduler, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import MONOCHROME, SCREEN_HEIGHT, SCREEN_WIDTH, Renderer, get_palette


@dataclass
class AppConfig:
    """Configuration for the interpreter window."""

    rom_path: Optional[Path] = None
    scale: int = 10
    instruction_rate: int = DEFAULT_INSTRUCTION_RATE
    wrap_sprites: bool = False
    seed: int | None = None
    palette: str = "mono"


class Chip8App:
    """Owns the window, translates host events and presents frames."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._pygame = None
        self._screen = None
        self._machine: Machine | None = None
        self._scheduler: Scheduler | None = None
        self._renderer = Renderer(get_palette(config.palette) if config.palette else MONOCHROME)
        self._tone_active = False
        self._frame_counter = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    @property
    def tone_active(self) -> bool:
        return self._tone_active

    def run(self) -> None:
        if not self._config.rom_path:
            raise RuntimeError("ROM image is required")
        machine = self._create_machine(self._config.rom_path)

        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame

        surface_size = (SCREEN_WIDTH * self._config.scale, SCREEN_HEIGHT * self._config.scale)
        self._screen = pygame.display.set_mode(surface_size)

        scheduler = self._create_scheduler(machine)
        try:
            scheduler.run(poll_events=self._pump_events, on_frame=self._present)
        except CPUError as exc:
            self._dump_trace()
            raise RuntimeError(f"CPU halted: {exc}") from exc
        finally:
            pygame.quit()
            self._pygame = None
            self._screen = None

    def stop(self) -> None:
        if self._scheduler is not None:
            self._scheduler.stop()

    def _create_machine(self, rom_path: Path) -> Machine:
        try:
            rom_image = read_rom(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except OSError as exc:
            raise RuntimeError(f"cannot read ROM {rom_path}: {exc.strerror or exc}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"invalid ROM {rom_path}: {exc}") from exc

        machine = create_machine(
            MachineConfig(
                rom_image=rom_image,
                wrap_sprites=self._config.wrap_sprites,
                seed=self._config.seed,
            )
        )
        self._machine = machine
        if debug_enabled("display"):
            debug_log("display", "loaded rom=%s bytes=%d", rom_path, len(rom_image))
        return machine

    def _create_scheduler(self, machine: Machine) -> Scheduler:
        scheduler = Scheduler(
            machine.cpu,
            instruction_rate=self._config.instruction_rate,
            sound_callback=self._handle_sound,
            trace=self._trace_recorder,
        )
        self._scheduler = scheduler
        return scheduler

    # ------------------------------------------------------------------
    # Host events

    def _pump_events(self) -> None:
        pygame = self._pygame
        if pygame is None:
            return
        for event in pygame.event.get():
            self._handle_event(pygame, event)

    def _handle_event(self, pygame, event) -> None:
        if event.type == pygame.QUIT:
            self.stop()
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.stop()
        elif event.type == pygame.KEYDOWN:
            self._handle_key_event(pygame, event.key, pressed=True)
        elif event.type == pygame.KEYUP:
            self._handle_key_event(pygame, event.key, pressed=False)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        if self._machine is None:
            return
        name = pygame.key.name(key_code)
        self._machine.keypad.handle_host_key(name, pressed)

    def _handle_sound(self, active: bool) -> None:
        self._tone_active = active

    # ------------------------------------------------------------------
    # Presentation

    def _present(self) -> None:
        machine = self._machine
        if machine is None or self._screen is None:
            return
        framebuffer = machine.framebuffer
        if not framebuffer.dirty:
            return
        frame = self._renderer.render(framebuffer.snapshot(), scale=self._config.scale)
        self._screen.blit(frame.to_surface(), (0, 0))
        self._pygame.display.flip()
        framebuffer.dirty = False
        self._frame_counter += 1
        if debug_enabled("display"):
            debug_log("display", "frame=%d", self._frame_counter)

    def _dump_trace(self, limit: int = 64) -> None:
        if self._trace_recorder is None:
            return
        self._trace_recorder.dump("trace", limit)
