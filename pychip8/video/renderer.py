"""Framebuffer to RGB pixel rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB image produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        """Return a ``pygame.Surface`` sharing this image's pixels."""

        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Scale a boolean framebuffer into an RGB image."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._background, self._foreground = validate_palette(palette)

    def render(self, framebuffer: Sequence[Sequence[bool]], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        rows = len(framebuffer)
        columns = len(framebuffer[0]) if rows else 0
        width = columns * scale
        height = rows * scale

        off = bytes(self._background) * scale
        on = bytes(self._foreground) * scale
        pixels = bytearray()
        for row in framebuffer:
            line = b"".join(on if pixel else off for pixel in row)
            pixels.extend(line * scale)
        return RenderResult(width, height, pixels)
