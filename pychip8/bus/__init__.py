"""Bus-related helpers for the CHIP-8 emulator."""

from .memory import ADDRESS_SPACE_SIZE, Memory, MemoryError, mask12

__all__ = [
    "ADDRESS_SPACE_SIZE",
    "Memory",
    "MemoryError",
    "mask12",
]
