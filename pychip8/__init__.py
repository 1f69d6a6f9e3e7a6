"""CHIP-8 virtual machine with pygame and terminal frontends.

The ``cpu`` package holds the interpreter core; the remaining packages are the
collaborators around it (memory, video, audio, input, program loading, the
machine wiring, and the user interface).
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
