"""Tests for machine assembly."""

from __future__ import annotations

import pytest

from pychip8.loader import RomFormatError
from pychip8.system import MachineConfig, create_machine
from pychip8.video import FONT_SET


def test_default_machine_layout() -> None:
    machine = create_machine(MachineConfig())

    assert machine.cpu.memory is machine.memory
    assert machine.cpu.framebuffer is machine.framebuffer
    assert machine.cpu.keypad is machine.keypad
    assert machine.cpu.state.pc == 0x200
    assert machine.memory.load_block(0, 80) == FONT_SET


def test_rom_image_loaded_at_program_start() -> None:
    machine = create_machine(MachineConfig(rom_image=b"\x60\x2A\x12\x02"))

    assert machine.memory.load_block(0x200, 4) == b"\x60\x2A\x12\x02"

    machine.cpu.step()
    assert machine.cpu.state.v[0] == 0x2A


def test_oversized_rom_rejected() -> None:
    with pytest.raises(RomFormatError):
        create_machine(MachineConfig(rom_image=bytes(0xE01)))


def test_wrap_option_reaches_framebuffer() -> None:
    assert create_machine(MachineConfig(wrap_sprites=True)).framebuffer.wrap
    assert not create_machine(MachineConfig()).framebuffer.wrap


def test_seed_makes_random_deterministic() -> None:
    rom = b"\xC0\xFF\xC1\xFF\xC2\xFF"
    first = create_machine(MachineConfig(rom_image=rom, seed=7))
    second = create_machine(MachineConfig(rom_image=rom, seed=7))

    for _ in range(3):
        first.cpu.step()
        second.cpu.step()

    assert first.cpu.state.v[:3] == second.cpu.state.v[:3]


def test_machines_do_not_share_state() -> None:
    first = create_machine(MachineConfig(rom_image=b"\x60\x01"))
    second = create_machine(MachineConfig(rom_image=b"\x60\x02"))

    first.cpu.step()
    second.cpu.step()

    assert first.cpu.state.v[0] == 1
    assert second.cpu.state.v[0] == 2
    assert first.memory is not second.memory


def test_reset_restores_rom_and_font() -> None:
    machine = create_machine(MachineConfig(rom_image=b"\x60\x2A"))
    machine.memory.store8(0x200, 0x00)
    machine.memory.store8(0x000, 0x00)
    machine.keypad.set_key(1, True)
    machine.cpu.step()

    machine.reset()

    assert machine.memory.load8(0x200) == 0x60
    assert machine.memory.load8(0x000) == FONT_SET[0]
    assert machine.keypad.lowest_pressed() is None
    assert machine.cpu.state.pc == 0x200
