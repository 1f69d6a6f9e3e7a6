"""Utility helpers for the CHIP-8 emulator."""

from .debug import debug_enabled, debug_log, reload_categories
from .trace import TraceRecorder

__all__ = [
    "debug_enabled",
    "debug_log",
    "reload_categories",
    "TraceRecorder",
]
