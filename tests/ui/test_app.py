"""Tests for the application frontends that do not need a display."""

from __future__ import annotations

import io
from pathlib import Path
from types import SimpleNamespace

import pytest

from pychip8.cpu.core import MAX_PROGRAM_SIZE
from pychip8.system import MachineConfig, create_machine
from pychip8.ui import FRONTEND_TERMINAL, AppConfig, Chip8App
from pychip8.video.terminal import BLOCK, SHOW_CURSOR


def write_program(tmp_path: Path, *words: int) -> Path:
    path = tmp_path / "program.ch8"
    path.write_bytes(b"".join(word.to_bytes(2, "big") for word in words))
    return path


def test_run_requires_program_path() -> None:
    app = Chip8App(AppConfig())

    with pytest.raises(RuntimeError, match="Program image is required"):
        app.run()


def test_create_machine_loads_program(tmp_path) -> None:
    path = write_program(tmp_path, 0x6042, 0x1202)
    app = Chip8App(AppConfig(program_path=path, seed=7))

    machine = app._create_machine(path)

    assert machine.vm.state.memory.load16(0x200) == 0x6042
    assert machine.instructions_per_tick == 12


def test_create_machine_rejects_oversized_program(tmp_path) -> None:
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(MAX_PROGRAM_SIZE + 1))
    app = Chip8App(AppConfig(program_path=path))

    with pytest.raises(RuntimeError, match="Failed to load program"):
        app._create_machine(path)


def test_missing_program_is_reported(tmp_path) -> None:
    app = Chip8App(AppConfig(program_path=tmp_path / "absent.ch8"))

    with pytest.raises(RuntimeError, match="does not exist"):
        app.run()


def test_terminal_frontend_draws_frames(tmp_path) -> None:
    # Draw the "0" glyph at the origin, then spin.
    path = write_program(tmp_path, 0x6000, 0xF029, 0xD005, 0x1206)
    stream = io.StringIO()
    app = Chip8App(AppConfig(program_path=path, frontend=FRONTEND_TERMINAL), stream=stream)
    machine = app._create_machine(path)

    app._run_terminal(machine, max_frames=2)

    output = stream.getvalue()
    assert output.endswith(SHOW_CURSOR)
    assert output.count("\x1b[38;5;210m") == 14
    # Blank initial frame plus the frame containing the glyph; the idle frame is skipped.
    assert output.count(BLOCK) == 2 * 64 * 32


def test_run_frame_converts_faults(tmp_path) -> None:
    app = Chip8App(AppConfig())
    machine = create_machine(MachineConfig(program=b"\x00\x00"))

    with pytest.raises(RuntimeError, match="Program halted"):
        app._run_frame(machine)


def test_key_events_drive_keypad(tmp_path) -> None:
    path = write_program(tmp_path, 0x1200)
    app = Chip8App(AppConfig(program_path=path))
    app._machine = app._create_machine(path)
    names = {97: "a", 120: "x"}
    fake_pygame = SimpleNamespace(key=SimpleNamespace(name=lambda code: names[code]))

    app._handle_key_event(fake_pygame, 97, pressed=True)
    app._handle_key_event(fake_pygame, 120, pressed=True)
    app._handle_key_event(fake_pygame, 120, pressed=False)

    keys = app.machine.keypad.snapshot()
    assert keys[0x7] is True
    assert keys[0x0] is False


def test_unknown_frontend_is_rejected(tmp_path) -> None:
    path = write_program(tmp_path, 0x1200)
    app = Chip8App(AppConfig(program_path=path, frontend="teletype"))

    with pytest.raises(RuntimeError, match="Unknown frontend"):
        app.run()
