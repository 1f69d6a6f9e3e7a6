"""Square-wave beeper driven by the sound timer."""

from __future__ import annotations

from array import array
from typing import Optional

TONE_FREQUENCY = 440.0


class SquareWaveBeeper:
    """Manage a looping square-wave tone using pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = TONE_FREQUENCY,
        volume: float = 0.25,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")

        if frequency <= 0.0:
            raise ValueError("frequency must be positive")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._frequency = frequency
        self._volume = max(0.0, min(1.0, volume))
        self._channel: Optional["pygame.mixer.Channel"] = None
        self._sound: Optional["pygame.mixer.Sound"] = None
        self._active = False

    # ------------------------------------------------------------------
    # Public API

    @property
    def active(self) -> bool:
        return self._active

    def set_active(self, enabled: bool) -> None:
        """Start or stop the tone; repeated calls with the same value are no-ops."""

        if enabled == self._active:
            return
        if not enabled:
            self._stop()
            return

        if self._sound is None:
            self._sound = self._build_sound()
        channel = self._channel
        if channel is None:
            channel = self._pygame.mixer.find_channel(True)
            if channel is None:
                return
            self._channel = channel

        channel.play(self._sound, loops=-1)
        channel.set_volume(self._volume)
        self._active = True

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        self._stop()
        self._channel = None
        self._sound = None

    # ------------------------------------------------------------------
    # Internals

    def _stop(self) -> None:
        if self._channel is not None:
            self._channel.stop()
        self._active = False

    def _build_sound(self) -> "pygame.mixer.Sound":
        period_samples = max(2, int(round(self._sample_rate / self._frequency)))
        half = period_samples // 2
        amplitude = 12_000
        buffer = array("h", [amplitude] * half + [-amplitude] * (period_samples - half))
        return self._pygame.mixer.Sound(buffer=buffer.tobytes())


__all__ = ["SquareWaveBeeper", "TONE_FREQUENCY"]
