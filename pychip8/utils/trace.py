"""Lightweight execution trace buffer for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .debug import debug_log


@dataclass
class TraceEntry:
    pc: int
    opcode: int | None
    mnemonic: str
    index: int
    registers: tuple[int, ...]
    stack_depth: int
    delay_timer: int
    sound_timer: int
    display_updated: bool
    note: str = ""


class TraceRecorder:
    """Ring buffer that stores recent VM snapshots."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._entries: List[TraceEntry | None] = [None] * capacity
        self._index = 0
        self._size = 0

    def record_step(
        self,
        state,
        opcode: int | None,
        *,
        mnemonic: str = "",
        display_updated: bool = False,
        note: str = "",
    ) -> None:
        """Record ``state`` as it was before executing ``opcode``."""

        entry = TraceEntry(
            pc=state.pc & 0xFFFF,
            opcode=None if opcode is None else opcode & 0xFFFF,
            mnemonic=mnemonic,
            index=state.index & 0xFFFF,
            registers=tuple(value & 0xFF for value in state.registers),
            stack_depth=len(state.stack),
            delay_timer=state.delay_timer & 0xFF,
            sound_timer=state.sound_timer & 0xFF,
            display_updated=display_updated,
            note=note,
        )
        self._append(entry)

    def entries(self, limit: int | None = None) -> Iterable[TraceEntry]:
        count = self._size if limit is None else min(self._size, max(limit, 0))
        for offset in range(count):
            index = (self._index - count + offset) % self._capacity
            entry = self._entries[index]
            if entry is not None:
                yield entry

    def last_entry(self) -> TraceEntry | None:
        if self._size == 0:
            return None
        index = (self._index - 1) % self._capacity
        return self._entries[index]

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        lines: list[str] = []
        for entry in self.entries(limit):
            opcode = "----" if entry.opcode is None else f"{entry.opcode:04X}"
            mnemonic = entry.mnemonic or "?"
            flags: list[str] = []
            if entry.display_updated:
                flags.append("DRAW")
            if entry.note:
                flags.append(entry.note)
            flag_repr = ",".join(flags) if flags else "-"
            registers = " ".join(f"{value:02X}" for value in entry.registers)
            line = (
                f"pc={entry.pc:04X} opcode={opcode} {mnemonic:<16} I={entry.index:04X} "
                f"V=[{registers}] SP={entry.stack_depth:02d} DT={entry.delay_timer:02X} "
                f"ST={entry.sound_timer:02X} flags={flag_repr}"
            )
            lines.append(line)
        return lines

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)

    def _append(self, entry: TraceEntry) -> None:
        self._entries[self._index] = entry
        self._index = (self._index + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1
