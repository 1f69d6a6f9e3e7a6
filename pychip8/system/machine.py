"""CHIP-8 machine assembly and run-loop pacing."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.cpu import Chip8, ExecutionError
from pychip8.cpu.opcodes import disassemble
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder, debug_enabled, debug_log

DEFAULT_INSTRUCTIONS_PER_SECOND = 720
DEFAULT_TIMER_HZ = 60


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    program: bytes = b""
    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    timer_hz: int = DEFAULT_TIMER_HZ
    seed: Optional[int] = None
    keypad: Keypad | None = None
    trace_capacity: int = 0

    @property
    def instructions_per_tick(self) -> int:
        return max(1, self.instructions_per_second // self.timer_hz)


@dataclass
class Machine:
    """Aggregates the VM with its keypad and pacing policy."""

    vm: Chip8
    keypad: Keypad
    instructions_per_tick: int
    timer_hz: int = DEFAULT_TIMER_HZ
    trace: TraceRecorder | None = None
    frame_count: int = 0

    def step(self) -> bool:
        """Execute one instruction against the current keypad snapshot."""

        keys = self.keypad.snapshot()
        trace = self.trace
        if trace is None:
            return self.vm.step(keys)

        before = self.vm.state.clone()
        word = self.vm.peek_word()
        mnemonic = disassemble(word)
        try:
            updated = self.vm.step(keys)
        except ExecutionError:
            trace.record_step(before, word, mnemonic=mnemonic, note="fault")
            raise
        trace.record_step(before, word, mnemonic=mnemonic, display_updated=updated)
        return updated

    def run_frame(self) -> bool:
        """Run one timer period of instructions, then tick the timers once.

        Calling this ``timer_hz`` times per second keeps the timers at their
        real-time rate. Returns whether any instruction touched the display.
        """

        updated = False
        for _ in range(self.instructions_per_tick):
            if self.step():
                updated = True
        self.vm.tick_timers()
        self.frame_count += 1
        if debug_enabled("cpu"):
            debug_log(
                "cpu",
                "frame=%d instructions=%d updated=%s sound=%s",
                self.frame_count,
                self.vm.instruction_count,
                updated,
                self.vm.sound_active,
            )
        return updated


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a machine with the requested configuration."""

    if config.instructions_per_second <= 0:
        raise ValueError("instructions_per_second must be positive")
    if config.timer_hz <= 0:
        raise ValueError("timer_hz must be positive")

    rng = random.Random(config.seed)
    vm = Chip8.load_program(config.program, rng=rng)
    keypad = config.keypad or Keypad()
    trace = TraceRecorder(config.trace_capacity) if config.trace_capacity > 0 else None

    return Machine(
        vm=vm,
        keypad=keypad,
        instructions_per_tick=config.instructions_per_tick,
        timer_hz=config.timer_hz,
        trace=trace,
    )
