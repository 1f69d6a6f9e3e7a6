"""Command-line entry point for the CHIP-8 emulator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.system.machine import DEFAULT_INSTRUCTIONS_PER_SECOND
from pychip8.ui import FRONTEND_TERMINAL, FRONTEND_WINDOW, AppConfig, Chip8App


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 virtual machine",
    )
    parser.add_argument(
        "program",
        type=Path,
        help="Path to the CHIP-8 program image (.ch8)",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the emulator in fullscreen mode",
    )
    parser.add_argument(
        "--terminal",
        action="store_true",
        help="Render to the terminal instead of a pygame window (no input or audio)",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=DEFAULT_INSTRUCTIONS_PER_SECOND,
        help=f"Instructions executed per second (default: {DEFAULT_INSTRUCTIONS_PER_SECOND})",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable the sound-timer beeper",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random number instruction",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.speed <= 0:
        parser.error("--speed must be positive")

    config = AppConfig(
        program_path=args.program,
        scale=args.scale,
        fullscreen=args.fullscreen,
        frontend=FRONTEND_TERMINAL if args.terminal else FRONTEND_WINDOW,
        instructions_per_second=args.speed,
        mute=args.mute,
        seed=args.seed,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
