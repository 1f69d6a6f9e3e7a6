"""CPU package for the CHIP-8 virtual machine."""

from .core import (
    Chip8,
    Chip8Error,
    Chip8State,
    ExecutionError,
    IllegalOpcodeError,
    InvalidFontCharacterError,
    ProgramTooLargeError,
    StackUnderflowError,
)
from . import opcodes

__all__ = [
    "Chip8",
    "Chip8State",
    "Chip8Error",
    "ExecutionError",
    "IllegalOpcodeError",
    "InvalidFontCharacterError",
    "ProgramTooLargeError",
    "StackUnderflowError",
    "opcodes",
]
