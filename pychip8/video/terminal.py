"""ANSI terminal output for the CHIP-8 framebuffer."""

from __future__ import annotations

import sys
from typing import Sequence, TextIO

from .palette import TERMINAL_OFF_CODE, TERMINAL_ON_CODE

BLOCK = "█"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"
CURSOR_HOME = "\x1b[H"


class TerminalRenderer:
    """Draw the display with full-block characters, skipping unchanged frames."""

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        on_code: int = TERMINAL_ON_CODE,
        off_code: int = TERMINAL_OFF_CODE,
    ) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._on = f"\x1b[38;5;{on_code}m{BLOCK}\x1b[0m"
        self._off = f"\x1b[38;5;{off_code}m{BLOCK}\x1b[0m"
        self._previous: tuple[tuple[bool, ...], ...] | None = None

    def open(self) -> None:
        self._stream.write(CLEAR_SCREEN)
        self._stream.flush()

    def render(self, framebuffer: Sequence[Sequence[bool]]) -> bool:
        """Write ``framebuffer``; return ``False`` when it matched the last frame."""

        frame = tuple(tuple(row) for row in framebuffer)
        if frame == self._previous:
            return False
        screen = "".join(
            "".join(self._on if pixel else self._off for pixel in row) + "\n"
            for row in frame
        )
        self._stream.write(HIDE_CURSOR + CURSOR_HOME + screen)
        self._stream.flush()
        self._previous = frame
        return True

    def close(self) -> None:
        self._stream.write(SHOW_CURSOR)
        self._stream.flush()
