"""Hexadecimal keypad handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16

#   Keyboard        Keypad
#   1 2 3 4         1 2 3 C
#   Q W E R   =>    4 5 6 D
#   A S D F         7 8 9 E
#   Z X C V         A 0 B F
KEYPAD_TEMPLATE: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


@dataclass
class Keypad:
    """State of the sixteen keypad keys, fed by host key names."""

    layout: Mapping[str, int] = field(default_factory=lambda: dict(KEYPAD_TEMPLATE))
    _pressed: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _active: Dict[int, int] = field(default_factory=dict)
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def press(self, key_name: str) -> bool:
        """Press the keypad key mapped to ``key_name``; return whether it is mapped."""

        key = self._lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        before = self._pressed[key]
        self._pressed[key] = True
        self._active[key] = self._active.get(key, 0) + 1
        if debug_enabled("input"):
            debug_log("input", "keypad_press key=%X", key)
        if not before:
            self._notify_listeners(key, True)
        return True

    def release(self, key_name: str) -> bool:
        key = self._lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        count = self._active.get(key, 0)
        before = self._pressed[key]
        if count <= 1:
            self._pressed[key] = False
            self._active.pop(key, None)
        else:
            self._active[key] = count - 1
        if debug_enabled("input"):
            debug_log("input", "keypad_release key=%X count=%d", key, self._active.get(key, 0))
        if before and not self._pressed[key]:
            self._notify_listeners(key, False)
        return True

    def set_key(self, key: int, pressed: bool) -> None:
        """Set keypad key ``key`` (0x0-0xF) directly."""

        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"keypad key out of range: {key}")
        before = self._pressed[key]
        self._pressed[key] = pressed
        if pressed:
            self._active[key] = max(1, self._active.get(key, 0))
        else:
            self._active.pop(key, None)
        if before != pressed:
            self._notify_listeners(key, pressed)

    def reset(self) -> None:
        self._pressed[:] = [False] * KEY_COUNT
        self._active.clear()

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._pressed)

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    def _lookup(self, key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return self.layout.get(name)

    def _notify_listeners(self, key: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(key, pressed)
