"""Tests for the decode tables and disassembler."""

from __future__ import annotations

import pytest

from pychip8.cpu import Chip8CPU
from pychip8.cpu.opcodes import (
    DECODE_TABLE,
    DEFAULT_INSTRUCTIONS,
    Instruction,
    Operands,
    OpcodeTable,
    build_decode_table,
    disassemble,
)


def test_operands_decompose_word() -> None:
    operands = Operands.from_word(0xD12F)

    assert operands.group == 0xD
    assert operands.x == 0x1
    assert operands.y == 0x2
    assert operands.n == 0xF
    assert operands.kk == 0x2F
    assert operands.nnn == 0x12F


def test_table_covers_full_instruction_set() -> None:
    assert len(DECODE_TABLE) == 34
    assert len(list(DECODE_TABLE)) == len(DEFAULT_INSTRUCTIONS)


def test_every_handler_exists_on_cpu() -> None:
    for instruction in DECODE_TABLE:
        assert callable(getattr(Chip8CPU, instruction.handler, None)), instruction.handler


def test_only_control_transfers_set_pc() -> None:
    setters = {instruction.handler for instruction in DECODE_TABLE if instruction.sets_pc}

    assert setters == {"op_jp", "op_call", "op_ret", "op_jp_offset"}


@pytest.mark.parametrize(
    "opcode, handler",
    [
        (0x00E0, "op_cls"),
        (0x00EE, "op_ret"),
        (0x1234, "op_jp"),
        (0x5AB0, "op_se_reg"),
        (0x5AB7, "op_se_reg"),
        (0x8AB6, "op_shr"),
        (0x8ABE, "op_shl"),
        (0xE59E, "op_skp"),
        (0xE5A1, "op_sknp"),
        (0xF00A, "op_wait_key"),
        (0xFE65, "op_load_registers"),
    ],
)
def test_lookup_resolves_handlers(opcode: int, handler: str) -> None:
    instruction = DECODE_TABLE.lookup(Operands.from_word(opcode))

    assert instruction is not None
    assert instruction.handler == handler


@pytest.mark.parametrize("opcode", [0x0000, 0x0123, 0x00E1, 0x8008, 0x800F, 0xE000, 0xF000, 0xFF99])
def test_lookup_returns_none_for_unknown(opcode: int) -> None:
    assert DECODE_TABLE.lookup(Operands.from_word(opcode)) is None


def test_duplicate_registration_rejected() -> None:
    table = OpcodeTable()
    table.register(Instruction(0x6, None, "LD", "op_ld_byte"))

    with pytest.raises(ValueError):
        table.register(Instruction(0x6, None, "LD", "op_ld_byte"))


def test_instruction_validates_sub_dispatch_key() -> None:
    with pytest.raises(ValueError):
        Instruction(0x8, None, "X", "op_x")
    with pytest.raises(ValueError):
        Instruction(0x6, 0x01, "X", "op_x")
    with pytest.raises(ValueError):
        Instruction(0x8, 0x10, "X", "op_x")


def test_custom_table_can_be_built() -> None:
    table = build_decode_table([Instruction(0x1, None, "JP {nnn:#05x}", "op_jp", sets_pc=True)])

    assert table.lookup(Operands.from_word(0x1222)) is not None
    assert table.lookup(Operands.from_word(0x6222)) is None
    assert len(table) == 1


@pytest.mark.parametrize(
    "opcode, text",
    [
        (0x00E0, "CLS"),
        (0x1200, "JP 0x200"),
        (0x6A0F, "LD VA, 0x0f"),
        (0x8124, "ADD V1, V2"),
        (0xD125, "DRW V1, V2, 5"),
        (0xF30A, "LD V3, K"),
        (0xFFFF, "DW 0xffff"),
    ],
)
def test_disassemble(opcode: int, text: str) -> None:
    assert disassemble(opcode) == text
