"""Tests for instruction decoding and the dispatch table."""

from __future__ import annotations

import pytest

from pychip8.cpu import Chip8
from pychip8.cpu.opcodes import (
    DEFAULT_INSTRUCTIONS,
    OPCODE_TABLE,
    Instruction,
    Opcode,
    OpcodeTable,
    Selector,
    disassemble,
    lookup,
)


def test_decode_splits_nibbles() -> None:
    opcode = Opcode.decode(0xD12F)

    assert opcode.family == 0xD
    assert opcode.x == 0x1
    assert opcode.y == 0x2
    assert opcode.n == 0xF
    assert opcode.nn == 0x2F
    assert opcode.nnn == 0x12F


def test_selector_depends_on_family() -> None:
    assert Opcode.decode(0x00E0).selector is Selector.NNN
    assert Opcode.decode(0x8124).selector is Selector.N
    assert Opcode.decode(0xF133).selector is Selector.NN
    assert Opcode.decode(0x1234).selector is Selector.NONE


def test_lookup_finds_registered_patterns() -> None:
    assert lookup(Opcode.decode(0x00E0)).mnemonic == "CLS"
    assert lookup(Opcode.decode(0x8AB4)).pattern == "8XY4"
    assert lookup(Opcode.decode(0xF90A)).handler == "op_wait_key"
    assert lookup(Opcode.decode(0x7FFF)).pattern == "7XNN"


def test_lookup_returns_none_for_undefined_patterns() -> None:
    assert lookup(Opcode.decode(0x0123)) is None
    assert lookup(Opcode.decode(0x5AB3)) is None
    assert lookup(Opcode.decode(0xE000)) is None


def test_table_covers_every_default_instruction() -> None:
    assert len(OPCODE_TABLE) == len(DEFAULT_INSTRUCTIONS) == 34


def test_every_handler_exists_on_interpreter() -> None:
    for instruction in DEFAULT_INSTRUCTIONS:
        assert callable(getattr(Chip8, instruction.handler, None)), instruction.handler


def test_duplicate_registration_is_rejected() -> None:
    table = OpcodeTable()
    table.register(Instruction("8XY4", "ADD VX, VY", "op_add_register"))

    with pytest.raises(ValueError):
        table.register(Instruction("8XY4", "ADD2", "op_other"))


def test_instruction_pattern_must_have_four_nibbles() -> None:
    with pytest.raises(ValueError):
        Instruction("8XY", "BAD", "op_bad")


@pytest.mark.parametrize(
    ("word", "text"),
    [
        (0x00E0, "CLS"),
        (0x1ABC, "JP 0xabc"),
        (0x2206, "CALL 0x206"),
        (0x3A42, "SE VA, 0x42"),
        (0x8124, "ADD V1, V2"),
        (0xD125, "DRW V1, V2, 5"),
        (0xF233, "LD B, V2"),
        (0x0123, "DW 0x0123"),
    ],
)
def test_disassemble(word: int, text: str) -> None:
    assert disassemble(word) == text
