"""Built-in hexadecimal font for the CHIP-8 interpreter."""

from __future__ import annotations

from typing import Sequence

FONT_WIDTH = 4
FONT_HEIGHT = 5
GLYPH_BYTES = FONT_HEIGHT
FONT_START = 0x050

# Glyphs 0-F in order, one byte per row, pixels in the high nibble.
FONT_GLYPHS: Sequence[bytes] = (
    bytes((0xF0, 0x90, 0x90, 0x90, 0xF0)),  # 0
    bytes((0x20, 0x60, 0x20, 0x20, 0x70)),  # 1
    bytes((0xF0, 0x10, 0xF0, 0x80, 0xF0)),  # 2
    bytes((0xF0, 0x10, 0xF0, 0x10, 0xF0)),  # 3
    bytes((0x90, 0x90, 0xF0, 0x10, 0x10)),  # 4
    bytes((0xF0, 0x80, 0xF0, 0x10, 0xF0)),  # 5
    bytes((0xF0, 0x80, 0xF0, 0x90, 0xF0)),  # 6
    bytes((0xF0, 0x10, 0x20, 0x40, 0x40)),  # 7
    bytes((0xF0, 0x90, 0xF0, 0x90, 0xF0)),  # 8
    bytes((0xF0, 0x90, 0xF0, 0x10, 0xF0)),  # 9
    bytes((0xF0, 0x90, 0xF0, 0x90, 0x90)),  # A
    bytes((0xE0, 0x90, 0xE0, 0x90, 0xE0)),  # B
    bytes((0xF0, 0x80, 0x80, 0x80, 0xF0)),  # C
    bytes((0xE0, 0x90, 0x90, 0x90, 0xE0)),  # D
    bytes((0xF0, 0x80, 0xF0, 0x80, 0xF0)),  # E
    bytes((0xF0, 0x80, 0xF0, 0x80, 0x80)),  # F
)

FONT_DATA: bytes = b"".join(FONT_GLYPHS)
FONT_END = FONT_START + len(FONT_DATA) - 1


def glyph_address(digit: int) -> int:
    """Return the address of the glyph for hexadecimal ``digit``."""

    if not 0 <= digit < len(FONT_GLYPHS):
        raise ValueError(f"no glyph for digit {digit}")
    return FONT_START + digit * GLYPH_BYTES
