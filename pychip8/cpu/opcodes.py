"""Opcode metadata and decode tables for the CHIP-8 instruction set.

Decoding is a lookup on the top nibble of the instruction word. Four groups
(``0x0``, ``0x8``, ``0xE`` and ``0xF``) hold several instructions and are
resolved by a second lookup on the low nibble or the low byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Final, Iterable, Iterator, List, Mapping, Sequence


class SubDispatch(Enum):
    """Field used to pick an instruction inside a shared top-nibble group."""

    LOW_NIBBLE = auto()
    LOW_BYTE = auto()


GROUP_DISPATCH: Final[Mapping[int, SubDispatch]] = {
    0x0: SubDispatch.LOW_BYTE,
    0x8: SubDispatch.LOW_NIBBLE,
    0xE: SubDispatch.LOW_BYTE,
    0xF: SubDispatch.LOW_BYTE,
}


@dataclass(frozen=True)
class Operands:
    """Fields decoded from a single 16-bit instruction word."""

    opcode: int
    x: int
    y: int
    n: int
    kk: int
    nnn: int

    @classmethod
    def from_word(cls, opcode: int) -> "Operands":
        opcode &= 0xFFFF
        return cls(
            opcode=opcode,
            x=(opcode >> 8) & 0x0F,
            y=(opcode >> 4) & 0x0F,
            n=opcode & 0x000F,
            kk=opcode & 0x00FF,
            nnn=opcode & 0x0FFF,
        )

    @property
    def group(self) -> int:
        return self.opcode >> 12


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single CHIP-8 instruction."""

    group: int
    key: int | None
    mnemonic: str
    handler: str
    sets_pc: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.group <= 0xF:
            raise ValueError(f"group out of range: {self.group}")
        dispatch = GROUP_DISPATCH.get(self.group)
        if dispatch is None and self.key is not None:
            raise ValueError(f"group {self.group:X} does not sub-dispatch")
        if dispatch is not None and self.key is None:
            raise ValueError(f"group {self.group:X} requires a sub-dispatch key")
        limit = 0x0F if dispatch is SubDispatch.LOW_NIBBLE else 0xFF
        if self.key is not None and not 0 <= self.key <= limit:
            raise ValueError(f"sub-dispatch key out of range: {self.key:#x}")

    def format(self, operands: Operands) -> str:
        """Render the mnemonic template with decoded operand values."""

        return self.mnemonic.format(
            x=operands.x,
            y=operands.y,
            n=operands.n,
            kk=operands.kk,
            nnn=operands.nnn,
        )


class DecodeTable:
    """Frozen two-level lookup built by :class:`OpcodeTable`."""

    def __init__(
        self,
        primary: Sequence[Instruction | None],
        groups: Mapping[int, Mapping[int, Instruction]],
    ) -> None:
        self._primary = tuple(primary)
        self._groups = {group: dict(entries) for group, entries in groups.items()}

    def lookup(self, operands: Operands) -> Instruction | None:
        group = operands.group
        dispatch = GROUP_DISPATCH.get(group)
        if dispatch is None:
            return self._primary[group]
        key = operands.n if dispatch is SubDispatch.LOW_NIBBLE else operands.kk
        return self._groups[group].get(key)

    def __iter__(self) -> Iterator[Instruction]:
        for group in range(0x10):
            if group in self._groups:
                yield from (self._groups[group][key] for key in sorted(self._groups[group]))
            elif self._primary[group] is not None:
                yield self._primary[group]  # type: ignore[misc]

    def __len__(self) -> int:
        return sum(1 for _ in self)


class OpcodeTable:
    """Mutable builder for the decode table."""

    _GROUP_COUNT: Final[int] = 0x10

    def __init__(self) -> None:
        self._primary: List[Instruction | None] = [None] * self._GROUP_COUNT
        self._groups: Dict[int, Dict[int, Instruction]] = {group: {} for group in GROUP_DISPATCH}

    def register(self, instruction: Instruction) -> None:
        if instruction.key is None:
            existing = self._primary[instruction.group]
            if existing is not None:
                raise ValueError(f"group {instruction.group:X} already registered as {existing.mnemonic}")
            self._primary[instruction.group] = instruction
            return
        entries = self._groups[instruction.group]
        existing = entries.get(instruction.key)
        if existing is not None:
            raise ValueError(
                f"opcode {instruction.group:X}/{instruction.key:#04x} already registered as {existing.mnemonic}"
            )
        entries[instruction.key] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> DecodeTable:
        return DecodeTable(self._primary, self._groups)


def build_decode_table(instructions: Iterable[Instruction]) -> DecodeTable:
    """Build the two-level decode table from instruction metadata."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    Instruction(0x0, 0xE0, "CLS", "op_cls"),
    Instruction(0x0, 0xEE, "RET", "op_ret", sets_pc=True),
    Instruction(0x1, None, "JP {nnn:#05x}", "op_jp", sets_pc=True),
    Instruction(0x2, None, "CALL {nnn:#05x}", "op_call", sets_pc=True),
    Instruction(0x3, None, "SE V{x:X}, {kk:#04x}", "op_se_byte"),
    Instruction(0x4, None, "SNE V{x:X}, {kk:#04x}", "op_sne_byte"),
    Instruction(0x5, None, "SE V{x:X}, V{y:X}", "op_se_reg"),
    Instruction(0x6, None, "LD V{x:X}, {kk:#04x}", "op_ld_byte"),
    Instruction(0x7, None, "ADD V{x:X}, {kk:#04x}", "op_add_byte"),
    # Register-register arithmetic
    Instruction(0x8, 0x0, "LD V{x:X}, V{y:X}", "op_ld_reg"),
    Instruction(0x8, 0x1, "OR V{x:X}, V{y:X}", "op_or"),
    Instruction(0x8, 0x2, "AND V{x:X}, V{y:X}", "op_and"),
    Instruction(0x8, 0x3, "XOR V{x:X}, V{y:X}", "op_xor"),
    Instruction(0x8, 0x4, "ADD V{x:X}, V{y:X}", "op_add_reg"),
    Instruction(0x8, 0x5, "SUB V{x:X}, V{y:X}", "op_sub"),
    Instruction(0x8, 0x6, "SHR V{x:X}", "op_shr"),
    Instruction(0x8, 0x7, "SUBN V{x:X}, V{y:X}", "op_subn"),
    Instruction(0x8, 0xE, "SHL V{x:X}", "op_shl"),
    Instruction(0x9, None, "SNE V{x:X}, V{y:X}", "op_sne_reg"),
    Instruction(0xA, None, "LD I, {nnn:#05x}", "op_ld_index"),
    Instruction(0xB, None, "JP V0, {nnn:#05x}", "op_jp_offset", sets_pc=True),
    Instruction(0xC, None, "RND V{x:X}, {kk:#04x}", "op_rnd"),
    Instruction(0xD, None, "DRW V{x:X}, V{y:X}, {n}", "op_drw"),
    # Keypad
    Instruction(0xE, 0x9E, "SKP V{x:X}", "op_skp"),
    Instruction(0xE, 0xA1, "SKNP V{x:X}", "op_sknp"),
    # Timers, index and memory transfers
    Instruction(0xF, 0x07, "LD V{x:X}, DT", "op_ld_from_dt"),
    Instruction(0xF, 0x0A, "LD V{x:X}, K", "op_wait_key"),
    Instruction(0xF, 0x15, "LD DT, V{x:X}", "op_ld_dt"),
    Instruction(0xF, 0x18, "LD ST, V{x:X}", "op_ld_st"),
    Instruction(0xF, 0x1E, "ADD I, V{x:X}", "op_add_index"),
    Instruction(0xF, 0x29, "LD F, V{x:X}", "op_ld_font"),
    Instruction(0xF, 0x33, "LD B, V{x:X}", "op_bcd"),
    Instruction(0xF, 0x55, "LD [I], V{x:X}", "op_store_registers"),
    Instruction(0xF, 0x65, "LD V{x:X}, [I]", "op_load_registers"),
)


DECODE_TABLE: DecodeTable = build_decode_table(DEFAULT_INSTRUCTIONS)


def disassemble(opcode: int, table: DecodeTable = DECODE_TABLE) -> str:
    """Return a mnemonic for ``opcode`` or a ``DW`` directive if unknown."""

    operands = Operands.from_word(opcode)
    instruction = table.lookup(operands)
    if instruction is None:
        return f"DW {operands.opcode:#06x}"
    return instruction.format(operands)
