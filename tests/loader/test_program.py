"""Tests for reading program images."""

from __future__ import annotations

import io

import pytest

from pychip8.loader import ProgramImage, ProgramLoadError, load_program, load_program_from_path


def test_load_program_reads_whole_stream() -> None:
    image = load_program(io.BytesIO(b"\x00\xe0\x12\x00"), "demo")

    assert image == ProgramImage(b"\x00\xe0\x12\x00", "demo")
    assert len(image) == 4


def test_load_program_from_path(tmp_path) -> None:
    path = tmp_path / "pong.ch8"
    path.write_bytes(b"\x6a\x02")

    image = load_program_from_path(path)

    assert image.data == b"\x6a\x02"
    assert image.name == "pong.ch8"


def test_empty_file_is_a_valid_image(tmp_path) -> None:
    path = tmp_path / "empty.ch8"
    path.write_bytes(b"")

    assert load_program_from_path(path).data == b""


def test_missing_file_reports_path(tmp_path) -> None:
    path = tmp_path / "missing.ch8"

    with pytest.raises(ProgramLoadError, match="does not exist"):
        load_program_from_path(path)


def test_directory_is_rejected(tmp_path) -> None:
    with pytest.raises(ProgramLoadError):
        load_program_from_path(tmp_path)


def test_unreadable_file_reports_permissions(tmp_path, monkeypatch) -> None:
    path = tmp_path / "locked.ch8"
    path.write_bytes(b"\x00")

    def deny(*args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(type(path), "open", deny)

    with pytest.raises(ProgramLoadError, match="no read permissions"):
        load_program_from_path(path)
