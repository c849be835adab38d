"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.bus import Memory
from pychip8.cpu import Chip8CPU
from pychip8.io import Keypad
from pychip8.loader import load_rom
from pychip8.video import Framebuffer, load_font


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    rom_image: Optional[bytes] = None
    wrap_sprites: bool = False
    stack_limit: int | None = None
    strict_illegal: bool = False
    seed: int | None = None


@dataclass
class Machine:
    """Aggregates all state owned by one virtual machine."""

    memory: Memory
    framebuffer: Framebuffer
    keypad: Keypad
    cpu: Chip8CPU
    rom_image: bytes = b""

    def reset(self) -> None:
        """Restore power-on state and reload the font and ROM."""

        self.memory.reset()
        load_font(self.memory)
        if self.rom_image:
            load_rom(self.rom_image, self.memory)
        self.framebuffer.clear()
        self.keypad.reset()
        self.cpu.reset()


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a machine with the font loaded and the ROM in place."""

    memory = Memory()
    load_font(memory)

    rom_image = bytes(config.rom_image or b"")
    if rom_image:
        load_rom(rom_image, memory)

    framebuffer = Framebuffer(wrap=config.wrap_sprites)
    keypad = Keypad()
    cpu = Chip8CPU(
        memory,
        framebuffer,
        keypad,
        rng=random.Random(config.seed),
        strict_illegal=config.strict_illegal,
        stack_limit=config.stack_limit,
    )
    cpu.reset()

    return Machine(
        memory=memory,
        framebuffer=framebuffer,
        keypad=keypad,
        cpu=cpu,
        rom_image=rom_image,
    )
