"""Tests for the pygame front end that do not need a display."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video.renderer import RenderResult


def fake_pygame(events: list) -> SimpleNamespace:
    flips: list[int] = []
    return SimpleNamespace(
        QUIT=256,
        KEYDOWN=768,
        KEYUP=769,
        K_ESCAPE=27,
        key=SimpleNamespace(name=lambda code: {27: "escape", 32: "space"}.get(code, chr(code))),
        event=SimpleNamespace(get=lambda: [events.pop(0)] if events else []),
        display=SimpleNamespace(flip=lambda: flips.append(1)),
        flips=flips,
    )


def key_event(kind: int, code: int) -> SimpleNamespace:
    return SimpleNamespace(type=kind, key=code)


@pytest.fixture
def rom_path(tmp_path):
    path = tmp_path / "rom.ch8"
    path.write_bytes(bytes([0xF3, 0x0A, 0x12, 0x02]))  # LD V3, K; JP 0x202
    return path


def test_create_machine_loads_rom(rom_path) -> None:
    app = Chip8App(AppConfig(rom_path=rom_path, seed=3))

    machine = app._create_machine(rom_path)

    assert machine.memory.load16(0x200) == 0xF30A
    assert app.machine is machine


def test_create_machine_missing_rom(tmp_path) -> None:
    app = Chip8App(AppConfig(rom_path=tmp_path / "nope.ch8"))

    with pytest.raises(RuntimeError, match="not found"):
        app._create_machine(tmp_path / "nope.ch8")


def test_create_machine_oversized_rom(tmp_path) -> None:
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(0x1000))
    app = Chip8App(AppConfig(rom_path=path))

    with pytest.raises(RuntimeError, match="invalid ROM"):
        app._create_machine(path)


def test_run_requires_rom_path() -> None:
    with pytest.raises(RuntimeError):
        Chip8App(AppConfig()).run()


def test_key_events_reach_keypad(rom_path) -> None:
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)
    pygame = fake_pygame([])

    app._handle_event(pygame, key_event(pygame.KEYDOWN, ord("a")))
    assert machine.keypad.is_pressed(0xA)

    app._handle_event(pygame, key_event(pygame.KEYUP, ord("a")))
    assert not machine.keypad.is_pressed(0xA)


def test_unmapped_key_down_clears_keypad(rom_path) -> None:
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)
    pygame = fake_pygame([])
    machine.keypad.set_key(1, True)

    app._handle_event(pygame, key_event(pygame.KEYDOWN, 32))

    assert machine.keypad.lowest_pressed() is None


def test_key_wait_resumes_from_host_events(rom_path) -> None:
    app = Chip8App(AppConfig(rom_path=rom_path, instruction_rate=100_000))
    machine = app._create_machine(rom_path)
    scheduler = app._create_scheduler(machine)
    events = [key_event(768, ord("9")), key_event(256, 0)]
    app._pygame = fake_pygame(events)

    scheduler.run(poll_events=app._pump_events)

    assert machine.cpu.state.v[3] == 0x9
    assert machine.cpu.state.pc == 0x202


def test_escape_stops_scheduler(rom_path) -> None:
    app = Chip8App(AppConfig(rom_path=rom_path, instruction_rate=100_000))
    machine = app._create_machine(rom_path)
    scheduler = app._create_scheduler(machine)
    app._pygame = fake_pygame([key_event(768, 27)])

    steps = scheduler.run(poll_events=app._pump_events)

    assert steps == 0
    assert machine.cpu.state.pc == 0x200


def test_present_only_when_dirty(rom_path, monkeypatch) -> None:
    app = Chip8App(AppConfig(rom_path=rom_path, scale=1))
    machine = app._create_machine(rom_path)
    blits: list[tuple] = []
    app._screen = SimpleNamespace(blit=lambda surface, pos: blits.append((surface, pos)))
    app._pygame = fake_pygame([])
    monkeypatch.setattr(RenderResult, "to_surface", lambda self: ("surface", self.width, self.height))

    app._present()
    assert blits == []

    machine.framebuffer.draw_sprite([0x80], 0, 0)
    app._present()

    assert blits == [(("surface", 64, 32), (0, 0))]
    assert app._pygame.flips == [1]
    assert not machine.framebuffer.dirty


def test_sound_callback_tracks_tone(rom_path) -> None:
    app = Chip8App(AppConfig(rom_path=rom_path))

    app._handle_sound(True)
    assert app.tone_active
    app._handle_sound(False)
    assert not app.tone_active
