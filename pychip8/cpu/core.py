"""CHIP-8 virtual machine state and instruction engine."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Tuple

from pychip8.bus import ADDRESS_SPACE_SIZE, Memory, mask12
from pychip8.utils import debug_enabled, debug_log
from pychip8.video.font import FONT_DATA, FONT_GLYPHS, FONT_START, GLYPH_BYTES

from .opcodes import OPCODE_TABLE, Instruction, Opcode, disassemble, lookup

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = ADDRESS_SPACE_SIZE - PROGRAM_START
REGISTER_COUNT = 16
KEY_COUNT = 16
FLAG_REGISTER = 0xF

KeySnapshot = Sequence[bool]
Framebuffer = Tuple[Tuple[bool, ...], ...]

NO_KEYS: KeySnapshot = (False,) * KEY_COUNT


class Chip8Error(Exception):
    """Base error for virtual machine failures."""


class ProgramTooLargeError(Chip8Error):
    """Raised when a program does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int) -> None:
        super().__init__(
            f"program of {size} bytes exceeds the {MAX_PROGRAM_SIZE} bytes available at {PROGRAM_START:#05x}")
        self.size = size


class ExecutionError(Chip8Error):
    """Raised when the running program cannot continue."""

    def __init__(self, message: str, *, pc: int, opcode: int) -> None:
        super().__init__(f"{message} (pc={pc:#06x} opcode={opcode:#06x})")
        self.pc = pc
        self.opcode = opcode


class IllegalOpcodeError(ExecutionError):
    """Raised when the fetched word matches no instruction pattern."""


class StackUnderflowError(ExecutionError):
    """Raised when returning from a subroutine with an empty call stack."""


class InvalidFontCharacterError(ExecutionError):
    """Raised when a font lookup names a register value above 0xF."""


def _blank_display() -> list[list[bool]]:
    return [[False] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)]


@dataclass
class Chip8State:
    """Complete mutable state of one virtual machine."""

    memory: Memory = field(default_factory=Memory)
    registers: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    index: int = 0x0000
    pc: int = PROGRAM_START
    stack: list[int] = field(default_factory=list)
    delay_timer: int = 0
    sound_timer: int = 0
    display: list[list[bool]] = field(default_factory=_blank_display)

    def clone(self) -> "Chip8State":
        memory = Memory(self.memory.start, self.memory.length)
        memory.load_image(self.memory.start, self.memory.snapshot())
        return Chip8State(
            memory=memory,
            registers=bytearray(self.registers),
            index=self.index,
            pc=self.pc,
            stack=list(self.stack),
            delay_timer=self.delay_timer,
            sound_timer=self.sound_timer,
            display=[list(row) for row in self.display],
        )


def build_state(program: bytes) -> Chip8State:
    """Create a fresh state with the font and ``program`` loaded."""

    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(len(program))
    state = Chip8State()
    state.memory.load_image(FONT_START, FONT_DATA)
    state.memory.load_image(PROGRAM_START, bytes(program))
    return state


def _key_pressed(keys: KeySnapshot, key: int) -> bool:
    return key < KEY_COUNT and key < len(keys) and bool(keys[key])


@dataclass
class Chip8:
    """The CHIP-8 interpreter: fetch, decode, and execute over a ``Chip8State``."""

    state: Chip8State = field(default_factory=lambda: build_state(b""))
    rng: random.Random = field(default_factory=random.Random)
    instruction_table: Mapping[Tuple[int, Optional[int]], Instruction] = field(default_factory=lambda: OPCODE_TABLE)
    instruction_count: int = 0

    @classmethod
    def load_program(cls, program: bytes, *, rng: random.Random | None = None) -> "Chip8":
        """Return a machine with ``program`` loaded at 0x200."""

        return cls(state=build_state(program), rng=rng or random.Random())

    def reset(self, program: bytes) -> None:
        """Replace the whole state with a freshly loaded ``program``.

        The size check runs first, so a rejected program leaves the current
        state untouched.
        """

        self.state = build_state(program)
        self.instruction_count = 0

    def step(self, keys: KeySnapshot = NO_KEYS) -> bool:
        """Execute one instruction and return whether the display changed."""

        state = self.state
        pc_before = state.pc
        word = self._fetch_word(pc_before)
        opcode = Opcode.decode(word)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%04x opcode=%04x %s", pc_before, word, disassemble(word))

        instruction = lookup(opcode, self.instruction_table)
        if instruction is None:
            raise IllegalOpcodeError("invalid instruction", pc=pc_before, opcode=word)
        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise Chip8Error(f"handler '{instruction.handler}' not implemented")

        state.pc = (pc_before + 2) & 0xFFFF
        try:
            updated = handler(opcode, keys)
        except ExecutionError:
            state.pc = pc_before
            raise
        self.instruction_count += 1
        return bool(updated)

    def peek_word(self) -> int:
        """Return the instruction word the next ``step`` will execute."""

        return self._fetch_word(self.state.pc)

    def tick_timers(self) -> None:
        """Advance the delay and sound timers by one 60 Hz tick."""

        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    @property
    def sound_active(self) -> bool:
        return self.state.sound_timer != 0

    def framebuffer(self) -> Framebuffer:
        """Return a read-only copy of the display, indexed ``[y][x]``."""

        return tuple(tuple(row) for row in self.state.display)

    # ------------------------------------------------------------------
    # Display and flow

    def op_cls(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.display = _blank_display()
        return True

    def op_ret(self, op: Opcode, keys: KeySnapshot) -> bool:
        if not self.state.stack:
            self._fault(StackUnderflowError, "return with an empty call stack", op)
        self.state.pc = self.state.stack.pop()
        return False

    def op_jp(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.pc = op.nnn
        return False

    def op_call(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.stack.append(self.state.pc)
        self.state.pc = op.nnn
        return False

    def op_jp_v0(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.pc = (op.nnn + self.state.registers[0]) & 0xFFFF
        return False

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_immediate(self, op: Opcode, keys: KeySnapshot) -> bool:
        self._skip_if(self.state.registers[op.x] == op.nn)
        return False

    def op_sne_immediate(self, op: Opcode, keys: KeySnapshot) -> bool:
        self._skip_if(self.state.registers[op.x] != op.nn)
        return False

    def op_se_register(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        self._skip_if(registers[op.x] == registers[op.y])
        return False

    def op_sne_register(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        self._skip_if(registers[op.x] != registers[op.y])
        return False

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_immediate(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.registers[op.x] = op.nn
        return False

    def op_add_immediate(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        registers[op.x] = (registers[op.x] + op.nn) & 0xFF
        return False

    def op_ld_register(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        registers[op.x] = registers[op.y]
        return False

    def op_or(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        registers[op.x] = registers[op.x] | registers[op.y]
        return False

    def op_and(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        registers[op.x] = registers[op.x] & registers[op.y]
        return False

    def op_xor(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        registers[op.x] = registers[op.x] ^ registers[op.y]
        return False

    def op_add_register(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        total = registers[op.x] + registers[op.y]
        registers[op.x] = total & 0xFF
        registers[FLAG_REGISTER] = 1 if total > 0xFF else 0
        return False

    def op_sub(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        registers[op.x] = (registers[op.x] - registers[op.y]) & 0xFF
        return False

    def op_subn(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        registers[op.x] = (registers[op.y] - registers[op.x]) & 0xFF
        return False

    def op_shr(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        value = registers[op.x]
        registers[op.x] = value >> 1
        registers[FLAG_REGISTER] = value & 0x01
        return False

    def op_shl(self, op: Opcode, keys: KeySnapshot) -> bool:
        registers = self.state.registers
        value = registers[op.x]
        registers[op.x] = (value << 1) & 0xFF
        registers[FLAG_REGISTER] = (value & 0x80) >> 7
        return False

    def op_rnd(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.registers[op.x] = self.rng.randrange(0x100) & op.nn
        return False

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_index(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.index = op.nnn
        return False

    def op_add_index(self, op: Opcode, keys: KeySnapshot) -> bool:
        state = self.state
        total = state.index + state.registers[op.x]
        state.index = total & 0xFFFF
        state.registers[FLAG_REGISTER] = 1 if total > 0xFFFF else 0
        return False

    def op_ld_font(self, op: Opcode, keys: KeySnapshot) -> bool:
        digit = self.state.registers[op.x]
        if digit >= len(FONT_GLYPHS):
            self._fault(InvalidFontCharacterError, f"no font glyph for V{op.x:X}={digit:#04x}", op)
        self.state.index = FONT_START + GLYPH_BYTES * digit
        return False

    def op_ld_bcd(self, op: Opcode, keys: KeySnapshot) -> bool:
        state = self.state
        value = state.registers[op.x]
        digits = (value // 100, (value // 10) % 10, value % 10)
        for offset, digit in enumerate(digits):
            state.memory.store8(mask12(state.index + offset), digit)
        return False

    def op_store_registers(self, op: Opcode, keys: KeySnapshot) -> bool:
        state = self.state
        for register in range(op.x + 1):
            state.memory.store8(mask12(state.index + register), state.registers[register])
        return False

    def op_load_registers(self, op: Opcode, keys: KeySnapshot) -> bool:
        state = self.state
        for register in range(op.x + 1):
            state.registers[register] = state.memory.load8(mask12(state.index + register))
        return False

    # ------------------------------------------------------------------
    # Sprites

    def op_drw(self, op: Opcode, keys: KeySnapshot) -> bool:
        state = self.state
        display = state.display
        origin_x = state.registers[op.x] % DISPLAY_WIDTH
        origin_y = state.registers[op.y] % DISPLAY_HEIGHT
        collision = False
        for row in range(op.n):
            y = origin_y + row
            if y >= DISPLAY_HEIGHT:
                break
            sprite = state.memory.load8(mask12(state.index + row))
            for bit in range(8):
                x = origin_x + bit
                if x >= DISPLAY_WIDTH:
                    break
                if not sprite & (0x80 >> bit):
                    continue
                if display[y][x]:
                    display[y][x] = False
                    collision = True
                else:
                    display[y][x] = True
        state.registers[FLAG_REGISTER] = 1 if collision else 0
        return True

    # ------------------------------------------------------------------
    # Keypad

    def op_skp(self, op: Opcode, keys: KeySnapshot) -> bool:
        self._skip_if(_key_pressed(keys, self.state.registers[op.x]))
        return False

    def op_sknp(self, op: Opcode, keys: KeySnapshot) -> bool:
        self._skip_if(not _key_pressed(keys, self.state.registers[op.x]))
        return False

    def op_wait_key(self, op: Opcode, keys: KeySnapshot) -> bool:
        state = self.state
        for key in range(KEY_COUNT):
            if _key_pressed(keys, key):
                state.registers[op.x] = key
                return False
        # Nothing pressed: run this instruction again on the next step.
        state.pc = (state.pc - 2) & 0xFFFF
        return False

    # ------------------------------------------------------------------
    # Timers

    def op_ld_delay(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.registers[op.x] = self.state.delay_timer
        return False

    def op_set_delay(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.delay_timer = self.state.registers[op.x]
        return False

    def op_set_sound(self, op: Opcode, keys: KeySnapshot) -> bool:
        self.state.sound_timer = self.state.registers[op.x]
        return False

    # ------------------------------------------------------------------
    # Helpers

    def _fetch_word(self, address: int) -> int:
        memory = self.state.memory
        high = memory.load8(mask12(address))
        low = memory.load8(mask12(address + 1))
        return (high << 8) | low

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _fault(self, error: type[ExecutionError], message: str, op: Opcode) -> None:
        raise error(message, pc=(self.state.pc - 2) & 0xFFFF, opcode=op.word)
