"""Opcode metadata for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Final, Iterable, Mapping, Optional, Tuple


class Selector(Enum):
    """Field used to tell apart instructions that share a leading nibble."""

    NONE = auto()
    NNN = auto()
    N = auto()
    NN = auto()


# Families not listed here are fully identified by their leading nibble.
FAMILY_SELECTORS: Final[Mapping[int, Selector]] = {
    0x0: Selector.NNN,
    0x5: Selector.N,
    0x8: Selector.N,
    0x9: Selector.N,
    0xE: Selector.NN,
    0xF: Selector.NN,
}


@dataclass(frozen=True)
class Opcode:
    """A fetched 16-bit instruction split into its nibble fields."""

    word: int
    family: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @classmethod
    def decode(cls, word: int) -> "Opcode":
        word &= 0xFFFF
        return cls(
            word=word,
            family=(word >> 12) & 0xF,
            x=(word >> 8) & 0xF,
            y=(word >> 4) & 0xF,
            n=word & 0xF,
            nn=word & 0xFF,
            nnn=word & 0xFFF,
        )

    @property
    def selector(self) -> Selector:
        return FAMILY_SELECTORS.get(self.family, Selector.NONE)

    def key(self) -> Tuple[int, Optional[int]]:
        """Return the dispatch key ``(family, selector value)``."""

        selector = self.selector
        if selector is Selector.NNN:
            return self.family, self.nnn
        if selector is Selector.N:
            return self.family, self.n
        if selector is Selector.NN:
            return self.family, self.nn
        return self.family, None


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single CHIP-8 instruction pattern."""

    pattern: str
    mnemonic: str
    handler: str

    def __post_init__(self) -> None:
        if len(self.pattern) != 4:
            raise ValueError(f"pattern must have four nibbles: {self.pattern!r}")

    @property
    def family(self) -> int:
        return int(self.pattern[0], 16)

    def key(self) -> Tuple[int, Optional[int]]:
        family = self.family
        selector = FAMILY_SELECTORS.get(family, Selector.NONE)
        if selector is Selector.NNN:
            return family, int(self.pattern[1:], 16)
        if selector is Selector.N:
            return family, int(self.pattern[3], 16)
        if selector is Selector.NN:
            return family, int(self.pattern[2:], 16)
        return family, None


class OpcodeTable:
    """Mutable builder for the instruction dispatch table."""

    def __init__(self) -> None:
        self._table: Dict[Tuple[int, Optional[int]], Instruction] = {}

    def register(self, instruction: Instruction) -> None:
        key = instruction.key()
        existing = self._table.get(key)
        if existing is not None:
            raise ValueError(
                f"pattern {instruction.pattern} already registered as {existing.mnemonic}")
        self._table[key] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Mapping[Tuple[int, Optional[int]], Instruction]:
        return dict(self._table)


def build_instruction_table(
    instructions: Iterable[Instruction],
) -> Mapping[Tuple[int, Optional[int]], Instruction]:
    """Build the ``(family, selector value)`` lookup table."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Tuple[Instruction, ...] = (
    # Display and flow
    Instruction("00E0", "CLS", "op_cls"),
    Instruction("00EE", "RET", "op_ret"),
    Instruction("1NNN", "JP NNN", "op_jp"),
    Instruction("2NNN", "CALL NNN", "op_call"),
    Instruction("BNNN", "JP V0, NNN", "op_jp_v0"),
    # Conditional skips
    Instruction("3XNN", "SE VX, NN", "op_se_immediate"),
    Instruction("4XNN", "SNE VX, NN", "op_sne_immediate"),
    Instruction("5XY0", "SE VX, VY", "op_se_register"),
    Instruction("9XY0", "SNE VX, VY", "op_sne_register"),
    # Register loads and arithmetic
    Instruction("6XNN", "LD VX, NN", "op_ld_immediate"),
    Instruction("7XNN", "ADD VX, NN", "op_add_immediate"),
    Instruction("8XY0", "LD VX, VY", "op_ld_register"),
    Instruction("8XY1", "OR VX, VY", "op_or"),
    Instruction("8XY2", "AND VX, VY", "op_and"),
    Instruction("8XY3", "XOR VX, VY", "op_xor"),
    Instruction("8XY4", "ADD VX, VY", "op_add_register"),
    Instruction("8XY5", "SUB VX, VY", "op_sub"),
    Instruction("8XY6", "SHR VX", "op_shr"),
    Instruction("8XY7", "SUBN VX, VY", "op_subn"),
    Instruction("8XYE", "SHL VX", "op_shl"),
    Instruction("CXNN", "RND VX, NN", "op_rnd"),
    # Index register and memory
    Instruction("ANNN", "LD I, NNN", "op_ld_index"),
    Instruction("FX1E", "ADD I, VX", "op_add_index"),
    Instruction("FX29", "LD F, VX", "op_ld_font"),
    Instruction("FX33", "LD B, VX", "op_ld_bcd"),
    Instruction("FX55", "LD [I], VX", "op_store_registers"),
    Instruction("FX65", "LD VX, [I]", "op_load_registers"),
    # Sprites
    Instruction("DXYN", "DRW VX, VY, N", "op_drw"),
    # Keypad
    Instruction("EX9E", "SKP VX", "op_skp"),
    Instruction("EXA1", "SKNP VX", "op_sknp"),
    Instruction("FX0A", "LD VX, K", "op_wait_key"),
    # Timers
    Instruction("FX07", "LD VX, DT", "op_ld_delay"),
    Instruction("FX15", "LD DT, VX", "op_set_delay"),
    Instruction("FX18", "LD ST, VX", "op_set_sound"),
)


OPCODE_TABLE: Mapping[Tuple[int, Optional[int]], Instruction] = build_instruction_table(DEFAULT_INSTRUCTIONS)


def lookup(
    opcode: Opcode,
    table: Mapping[Tuple[int, Optional[int]], Instruction] = OPCODE_TABLE,
) -> Instruction | None:
    """Return the instruction record for ``opcode`` or ``None`` if undefined."""

    return table.get(opcode.key())


def disassemble(word: int) -> str:
    """Render ``word`` as a mnemonic with its operands filled in."""

    opcode = Opcode.decode(word)
    instruction = lookup(opcode)
    if instruction is None:
        return f"DW {opcode.word:#06x}"
    text = instruction.mnemonic
    text = text.replace("NNN", f"{opcode.nnn:#05x}")
    text = text.replace("NN", f"{opcode.nn:#04x}")
    text = text.replace("VX", f"V{opcode.x:X}")
    text = text.replace("VY", f"V{opcode.y:X}")
    if instruction.family == 0xD:
        text = text[:-1] + f"{opcode.n}"
    return text
