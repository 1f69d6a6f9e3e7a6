"""User interface frontends for the CHIP-8 emulator."""

from .app import FRONTEND_TERMINAL, FRONTEND_WINDOW, AppConfig, Chip8App

__all__ = [
    "AppConfig",
    "Chip8App",
    "FRONTEND_TERMINAL",
    "FRONTEND_WINDOW",
]
