"""Program images for the CHIP-8 loader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO


class ProgramLoadError(RuntimeError):
    """Raised when a program image cannot be read."""


@dataclass
class ProgramImage:
    """Raw program bytes together with where they came from."""

    data: bytes
    name: str = ""

    def __len__(self) -> int:
        return len(self.data)


def load_program(stream: BinaryIO, name: str = "") -> ProgramImage:
    """Read a whole program image from ``stream``."""

    data = stream.read()
    if data is None:
        raise ProgramLoadError("Program stream returned no data")
    return ProgramImage(bytes(data), name)


def load_program_from_path(path: Path) -> ProgramImage:
    """Read a program image from the filesystem."""

    path = Path(path)
    try:
        with path.open("rb") as handle:
            return load_program(handle, path.name)
    except FileNotFoundError as exc:
        raise ProgramLoadError(f"{path} does not exist.") from exc
    except IsADirectoryError as exc:
        raise ProgramLoadError(f"{path} is a directory, not a program file.") from exc
    except PermissionError as exc:
        raise ProgramLoadError(f"no read permissions for {path}") from exc
