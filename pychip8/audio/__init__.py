"""Audio output for the CHIP-8 emulator."""

from .beeper import TONE_FREQUENCY, SquareWaveBeeper

__all__ = ["SquareWaveBeeper", "TONE_FREQUENCY"]
