"""Input helpers for the CHIP-8 emulator."""

from .keypad import KEY_COUNT, KEYPAD_TEMPLATE, Keypad

__all__ = [
    "KEY_COUNT",
    "KEYPAD_TEMPLATE",
    "Keypad",
]
