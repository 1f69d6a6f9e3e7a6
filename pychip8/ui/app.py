"""Pygame and terminal frontends for the CHIP-8 emulator."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from pychip8.audio import SquareWaveBeeper
from pychip8.cpu import ExecutionError, ProgramTooLargeError
from pychip8.cpu.core import DISPLAY_HEIGHT, DISPLAY_WIDTH
from pychip8.loader import load_program_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.system.machine import DEFAULT_INSTRUCTIONS_PER_SECOND
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Renderer, TerminalRenderer

FRONTEND_WINDOW = "window"
FRONTEND_TERMINAL = "terminal"


@dataclass
class AppConfig:
    """Configuration for the emulator frontend."""

    program_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    frontend: str = FRONTEND_WINDOW
    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    mute: bool = False
    seed: Optional[int] = None


class Chip8App:
    """Drive a machine from a pygame window or a text terminal."""

    def __init__(self, config: AppConfig, *, stream: TextIO | None = None) -> None:
        self._config = config
        self._stream = stream
        self._running = False
        self._beeper: SquareWaveBeeper | None = None
        self._machine: Machine | None = None
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._pygame = None

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        if not self._config.program_path:
            raise RuntimeError("Program image is required; pass the path to a .ch8 file")
        machine = self._create_machine(self._config.program_path)
        self._machine = machine

        if self._config.frontend == FRONTEND_TERMINAL:
            self._run_terminal(machine)
        elif self._config.frontend == FRONTEND_WINDOW:
            self._run_window(machine)
        else:
            raise RuntimeError(f"Unknown frontend: {self._config.frontend}")

    def _create_machine(self, program_path: Path) -> Machine:
        image = load_program_from_path(program_path)
        try:
            return create_machine(
                MachineConfig(
                    program=image.data,
                    instructions_per_second=self._config.instructions_per_second,
                    seed=self._config.seed,
                    trace_capacity=512 if debug_enabled("trace") else 0,
                )
            )
        except ProgramTooLargeError as exc:
            raise RuntimeError(f"Failed to load program {program_path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Window frontend

    def _run_window(self, machine: Machine) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the window frontend") from exc

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption("CHIP-8")
        self._pygame = pygame

        if not self._config.mute:
            self._initialise_audio(pygame)

        scale = max(1, self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode((DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale), flags)
        renderer = Renderer()
        clock = pygame.time.Clock()

        frame = renderer.render(machine.vm.framebuffer(), scale=scale)
        screen.blit(frame.to_surface(), (0, 0))
        pygame.display.flip()

        self._running = True
        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)
                if not self._running:
                    break

                frame_start = time.perf_counter()
                updated = self._run_frame(machine)
                self._update_audio(machine)

                if updated:
                    frame = renderer.render(machine.vm.framebuffer(), scale=scale)
                    screen.blit(frame.to_surface(), (0, 0))
                    pygame.display.flip()

                self._report_perf(machine, time.perf_counter() - frame_start)
                clock.tick(machine.timer_hz)
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _update_audio(self, machine: Machine) -> None:
        if self._beeper is None:
            return
        active = machine.vm.sound_active
        if active != self._beeper.active and debug_enabled("audio"):
            debug_log("audio", "beeper active=%s", active)
        self._beeper.set_active(active)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if pressed:
            machine.keypad.press(name)
        else:
            machine.keypad.release(name)

    # ------------------------------------------------------------------
    # Terminal frontend

    def _run_terminal(self, machine: Machine, *, max_frames: int | None = None) -> None:
        renderer = TerminalRenderer(self._stream)
        period = 1.0 / machine.timer_hz
        renderer.open()
        renderer.render(machine.vm.framebuffer())

        self._running = True
        frames = 0
        try:
            while self._running:
                frame_start = time.perf_counter()
                if self._run_frame(machine):
                    renderer.render(machine.vm.framebuffer())
                frames += 1
                if max_frames is not None and frames >= max_frames:
                    break
                elapsed = time.perf_counter() - frame_start
                self._report_perf(machine, elapsed)
                if elapsed < period:
                    time.sleep(period - elapsed)
        except KeyboardInterrupt:
            pass
        finally:
            self._running = False
            renderer.close()

    # ------------------------------------------------------------------
    # Shared helpers

    def _run_frame(self, machine: Machine) -> bool:
        try:
            return machine.run_frame()
        except ExecutionError as exc:
            self._running = False
            if machine.trace is not None:
                machine.trace.dump("trace", limit=64)
            raise RuntimeError(f"Program halted: {exc}") from exc

    def _report_perf(self, machine: Machine, duration: float) -> None:
        if not self._perf_enabled or duration <= 0:
            return
        self._perf_frame += 1
        debug_log(
            "perf",
            "frame=%d instructions=%d frame_ms=%.3f",
            self._perf_frame,
            machine.instructions_per_tick,
            duration * 1000.0,
        )
