"""CHIP-8 CPU: register file, call stack and instruction dispatch."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List

from pychip8.bus import Memory
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Framebuffer

from .opcodes import DECODE_TABLE, DecodeTable, Instruction, Operands

PROGRAM_START = 0x200
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF


class CPUError(Exception):
    """Base error for CPU-related failures."""


class IllegalOpcodeError(CPUError):
    """Raised for unrecognised opcodes when strict decoding is enabled."""


class StackOverflowError(CPUError):
    """Raised when a call exceeds the configured stack limit."""


class StackUnderflowError(CPUError):
    """Raised when returning with an empty call stack."""


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000
    pc: int = PROGRAM_START
    dt: int = 0x00
    st: int = 0x00
    stack: List[int] = field(default_factory=list)

    def clone(self) -> "CPUState":
        return CPUState(list(self.v), self.i, self.pc, self.dt, self.st, list(self.stack))


@dataclass
class Chip8CPU:
    """Fetch/decode/execute engine operating on one machine's state."""

    memory: Memory
    framebuffer: Framebuffer
    keypad: Keypad
    rng: random.Random = field(default_factory=random.Random)
    decode_table: DecodeTable = field(default=DECODE_TABLE)
    strict_illegal: bool = False
    stack_limit: int | None = None

    state: CPUState = field(default_factory=CPUState)
    instruction_count: int = 0
    waiting_for_key: bool = False
    last_opcode: int | None = None

    def reset(self) -> None:
        """Clear registers, timers and stack and point PC at the program."""

        self.state = CPUState()
        self.instruction_count = 0
        self.waiting_for_key = False
        self.last_opcode = None

    def fetch(self) -> int:
        return self.memory.load16(self.state.pc)

    def decode(self, opcode: int) -> tuple[Instruction | None, Operands]:
        operands = Operands.from_word(opcode)
        return self.decode_table.lookup(operands), operands

    def step(self) -> Instruction | None:
        """Execute one instruction and return its metadata.

        PC advances by two afterwards unless the instruction placed PC itself
        or an ``Fx0A`` is still waiting for a key.
        """

        pc_before = self.state.pc
        opcode = self.fetch()
        self.last_opcode = opcode
        instruction, operands = self.decode(opcode)
        self.instruction_count += 1

        if instruction is None:
            if self.strict_illegal:
                raise IllegalOpcodeError(f"illegal opcode {opcode:04x} at {pc_before:04x}")
            if debug_enabled("cpu"):
                debug_log("cpu", "pc=%04x opcode=%04x ignored", pc_before, opcode)
            self._advance()
            return None

        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%04x opcode=%04x %s", pc_before, opcode, instruction.format(operands))

        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")
        handler(operands)

        if not instruction.sets_pc and not self.waiting_for_key:
            self._advance()
        return instruction

    def tick_timers(self) -> None:
        """Decrement the delay and sound timers, stopping at zero."""

        if self.state.dt > 0:
            self.state.dt -= 1
        if self.state.st > 0:
            self.state.st -= 1

    # ------------------------------------------------------------------
    # Flow control

    def op_cls(self, _: Operands) -> None:
        self.framebuffer.clear()

    def op_ret(self, _: Operands) -> None:
        if not self.state.stack:
            if self.strict_illegal or self.stack_limit is not None:
                raise StackUnderflowError(f"return with empty call stack at {self.state.pc:04x}")
            if debug_enabled("cpu"):
                debug_log("cpu", "pc=%04x return with empty stack ignored", self.state.pc)
            self._advance()
            return
        self.state.pc = self.state.stack.pop()

    def op_jp(self, operands: Operands) -> None:
        self.state.pc = operands.nnn

    def op_call(self, operands: Operands) -> None:
        if self.stack_limit is not None and len(self.state.stack) >= self.stack_limit:
            raise StackOverflowError(f"call depth exceeds {self.stack_limit} at {self.state.pc:04x}")
        self.state.stack.append((self.state.pc + 2) & 0xFFFF)
        self.state.pc = operands.nnn

    def op_jp_offset(self, operands: Operands) -> None:
        self.state.pc = (self.state.v[0] + operands.nnn) & 0xFFFF

    def op_se_byte(self, operands: Operands) -> None:
        if self.state.v[operands.x] == operands.kk:
            self._advance()

    def op_sne_byte(self, operands: Operands) -> None:
        if self.state.v[operands.x] != operands.kk:
            self._advance()

    def op_se_reg(self, operands: Operands) -> None:
        if self.state.v[operands.x] == self.state.v[operands.y]:
            self._advance()

    def op_sne_reg(self, operands: Operands) -> None:
        if self.state.v[operands.x] != self.state.v[operands.y]:
            self._advance()

    # ------------------------------------------------------------------
    # Register arithmetic

    def op_ld_byte(self, operands: Operands) -> None:
        self.state.v[operands.x] = operands.kk

    def op_add_byte(self, operands: Operands) -> None:
        v = self.state.v
        v[operands.x] = (v[operands.x] + operands.kk) & 0xFF

    def op_ld_reg(self, operands: Operands) -> None:
        self.state.v[operands.x] = self.state.v[operands.y]

    def op_or(self, operands: Operands) -> None:
        v = self.state.v
        v[operands.x] = v[operands.x] | v[operands.y]

    def op_and(self, operands: Operands) -> None:
        v = self.state.v
        v[operands.x] = v[operands.x] & v[operands.y]

    def op_xor(self, operands: Operands) -> None:
        v = self.state.v
        v[operands.x] = v[operands.x] ^ v[operands.y]

    def op_add_reg(self, operands: Operands) -> None:
        v = self.state.v
        total = v[operands.x] + v[operands.y]
        self._set_flag_then(operands.x, total > 0xFF, total)

    def op_sub(self, operands: Operands) -> None:
        v = self.state.v
        x, y = v[operands.x], v[operands.y]
        self._set_flag_then(operands.x, x > y, x - y)

    def op_subn(self, operands: Operands) -> None:
        v = self.state.v
        x, y = v[operands.x], v[operands.y]
        self._set_flag_then(operands.x, y > x, y - x)

    def op_shr(self, operands: Operands) -> None:
        value = self.state.v[operands.x]
        self._set_flag_then(operands.x, value & 0x01, value >> 1)

    def op_shl(self, operands: Operands) -> None:
        value = self.state.v[operands.x]
        self._set_flag_then(operands.x, (value >> 7) & 0x01, value << 1)

    def op_rnd(self, operands: Operands) -> None:
        self.state.v[operands.x] = self.rng.randrange(0x100) & operands.kk

    # ------------------------------------------------------------------
    # Index register, memory and display

    def op_ld_index(self, operands: Operands) -> None:
        self.state.i = operands.nnn

    def op_add_index(self, operands: Operands) -> None:
        self.state.i = (self.state.i + self.state.v[operands.x]) & 0xFFFF

    def op_ld_font(self, operands: Operands) -> None:
        self.state.i = self.state.v[operands.x] * 5

    def op_bcd(self, operands: Operands) -> None:
        value = self.state.v[operands.x]
        index = self.state.i
        self.memory.store8(index, value // 100)
        self.memory.store8(index + 1, (value // 10) % 10)
        self.memory.store8(index + 2, value % 10)

    def op_store_registers(self, operands: Operands) -> None:
        for offset in range(operands.x + 1):
            self.memory.store8(self.state.i + offset, self.state.v[offset])

    def op_load_registers(self, operands: Operands) -> None:
        for offset in range(operands.x + 1):
            self.state.v[offset] = self.memory.load8(self.state.i + offset)

    def op_drw(self, operands: Operands) -> None:
        v = self.state.v
        sprite = self.memory.load_block(self.state.i, operands.n)
        collision = self.framebuffer.draw_sprite(sprite, v[operands.x], v[operands.y])
        v[FLAG_REGISTER] = 1 if collision else 0

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_from_dt(self, operands: Operands) -> None:
        self.state.v[operands.x] = self.state.dt

    def op_ld_dt(self, operands: Operands) -> None:
        self.state.dt = self.state.v[operands.x]

    def op_ld_st(self, operands: Operands) -> None:
        self.state.st = self.state.v[operands.x]

    def op_skp(self, operands: Operands) -> None:
        if self.keypad.is_pressed(self.state.v[operands.x]):
            self._advance()

    def op_sknp(self, operands: Operands) -> None:
        if not self.keypad.is_pressed(self.state.v[operands.x]):
            self._advance()

    def op_wait_key(self, operands: Operands) -> None:
        key = self.keypad.lowest_pressed()
        if key is None:
            if not self.waiting_for_key and debug_enabled("input"):
                debug_log("input", "waiting for key into V%X", operands.x)
            self.waiting_for_key = True
            return
        self.waiting_for_key = False
        self.state.v[operands.x] = key

    # ------------------------------------------------------------------
    # Helpers

    def _advance(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _set_flag_then(self, register: int, flag: int | bool, result: int) -> None:
        # VF is written before Vx, so Vx wins when x == F.
        self.state.v[FLAG_REGISTER] = 1 if flag else 0
        self.state.v[register] = result & 0xFF
