"""Unit tests for the framebuffer renderers and font data."""

from __future__ import annotations

import io

import pytest

from pychip8.video import (
    FONT_DATA,
    FONT_GLYPHS,
    FONT_START,
    GLYPH_BYTES,
    Renderer,
    TerminalRenderer,
    glyph_address,
    validate_palette,
)
from pychip8.video.font import FONT_END
from pychip8.video.terminal import HIDE_CURSOR, SHOW_CURSOR

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def blank_frame(width: int = 64, height: int = 32) -> list[list[bool]]:
    return [[False] * width for _ in range(height)]


def test_font_layout() -> None:
    assert len(FONT_GLYPHS) == 16
    assert len(FONT_DATA) == 80
    assert FONT_START == 0x050
    assert FONT_END == 0x09F
    assert FONT_GLYPHS[0xF] == bytes((0xF0, 0x80, 0xF0, 0x80, 0x80))


def test_glyph_address() -> None:
    assert glyph_address(0) == 0x050
    assert glyph_address(0xF) == 0x050 + 15 * GLYPH_BYTES
    with pytest.raises(ValueError):
        glyph_address(16)


def test_render_dimensions_and_pixels() -> None:
    frame = blank_frame()
    frame[0][0] = True
    frame[31][63] = True

    result = Renderer().render(frame)

    assert result.width == 64
    assert result.height == 32
    assert result.get_pixel(0, 0) == WHITE
    assert result.get_pixel(1, 0) == BLACK
    assert result.get_pixel(63, 31) == WHITE


def test_render_scale_factor() -> None:
    frame = blank_frame()
    frame[0][1] = True

    result = Renderer().render(frame, scale=10)

    assert result.width == 640
    assert result.height == 320
    assert result.get_pixel(9, 0) == BLACK
    assert result.get_pixel(10, 0) == WHITE
    assert result.get_pixel(19, 9) == WHITE
    assert result.get_pixel(20, 0) == BLACK
    assert result.get_pixel(10, 10) == BLACK


def test_render_custom_palette() -> None:
    frame = blank_frame(2, 1)
    frame[0][1] = True

    result = Renderer(((1, 2, 3), (4, 5, 6))).render(frame)

    assert result.get_pixel(0, 0) == (1, 2, 3)
    assert result.get_pixel(1, 0) == (4, 5, 6)


def test_render_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        Renderer().render(blank_frame(), scale=0)
    with pytest.raises(ValueError):
        validate_palette(((0, 0, 0),))
    with pytest.raises(IndexError):
        Renderer().render(blank_frame()).get_pixel(64, 0)


def test_terminal_renderer_writes_blocks() -> None:
    stream = io.StringIO()
    renderer = TerminalRenderer(stream)
    frame = blank_frame(2, 2)
    frame[1][0] = True

    assert renderer.render(frame) is True

    output = stream.getvalue()
    assert output.startswith(HIDE_CURSOR)
    assert output.count("█") == 4
    assert output.count("\x1b[38;5;210m") == 1
    assert output.count("\x1b[38;5;0m") == 3
    assert output.count("\n") == 2


def test_terminal_renderer_skips_identical_frames() -> None:
    stream = io.StringIO()
    renderer = TerminalRenderer(stream)
    frame = blank_frame(4, 2)

    renderer.render(frame)
    written = len(stream.getvalue())
    assert renderer.render(frame) is False
    assert len(stream.getvalue()) == written

    frame[0][0] = True
    assert renderer.render(frame) is True


def test_terminal_renderer_restores_cursor() -> None:
    stream = io.StringIO()
    renderer = TerminalRenderer(stream)

    renderer.open()
    renderer.close()

    assert stream.getvalue().endswith(SHOW_CURSOR)
