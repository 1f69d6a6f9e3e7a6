"""Video helpers for the CHIP-8 emulator."""

from __future__ import annotations

from .font import FONT_DATA, FONT_GLYPHS, FONT_HEIGHT, FONT_START, FONT_WIDTH, GLYPH_BYTES, glyph_address
from .palette import MONOCHROME, validate_palette
from .renderer import RenderResult, Renderer
from .terminal import TerminalRenderer

__all__ = [
    "FONT_DATA",
    "FONT_GLYPHS",
    "FONT_START",
    "FONT_WIDTH",
    "FONT_HEIGHT",
    "GLYPH_BYTES",
    "glyph_address",
    "Renderer",
    "RenderResult",
    "TerminalRenderer",
    "MONOCHROME",
    "validate_palette",
]
