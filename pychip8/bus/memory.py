"""Byte-addressable memory for the CHIP-8 virtual machine.

The interpreter sees a single flat 4 KB space. ``Memory`` keeps the region
bookkeeping of a mapped block (start address and length) so that font data,
program images, and diagnostics all go through the same bounds-checked
accessors.
"""

from __future__ import annotations

from dataclasses import dataclass

ADDRESS_SPACE_SIZE = 0x1000
ADDRESS_MASK = ADDRESS_SPACE_SIZE - 1


def mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit address space of the interpreter."""

    return value & ADDRESS_MASK


class MemoryError(Exception):
    """Raised when a memory region is misconfigured or used incorrectly."""


@dataclass
class Memory:
    """Simple byte-addressable memory region."""

    start: int = 0x000
    length: int = ADDRESS_SPACE_SIZE

    def __post_init__(self) -> None:
        if self.start < 0 or self.length <= 0:
            raise MemoryError("memory region must have a positive length and non-negative start")
        self._data = bytearray(self.length)

    def get_start_address(self) -> int:
        return self.start

    def get_end_address(self) -> int:
        return self.start + self.length - 1

    def _offset(self, address: int) -> int:
        offset = address - self.start
        if not 0 <= offset < self.length:
            raise MemoryError(f"address {address:#05x} outside region {self.start:#05x}-{self.get_end_address():#05x}")
        return offset

    def load8(self, address: int) -> int:
        return self._data[self._offset(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[self._offset(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return ((high & 0xFF) << 8) | (low & 0xFF)

    def load_image(self, address: int, data: bytes) -> None:
        """Copy ``data`` into the region starting at ``address``."""

        if not data:
            return
        offset = self._offset(address)
        end = offset + len(data)
        if end > self.length:
            raise MemoryError(f"image of {len(data)} bytes at {address:#05x} overflows region")
        self._data[offset:end] = data

    def clear(self) -> None:
        self._data[:] = bytes(self.length)

    def snapshot(self) -> bytes:
        return bytes(self._data)
