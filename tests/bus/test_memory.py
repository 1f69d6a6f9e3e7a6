"""Tests for the byte-addressable memory region."""

from __future__ import annotations

import pytest

from pychip8.bus import ADDRESS_SPACE_SIZE, Memory, MemoryError, mask12


def test_default_region_covers_address_space() -> None:
    memory = Memory()

    assert memory.get_start_address() == 0x000
    assert memory.get_end_address() == ADDRESS_SPACE_SIZE - 1
    assert memory.snapshot() == bytes(ADDRESS_SPACE_SIZE)


def test_store_truncates_to_byte() -> None:
    memory = Memory()
    memory.store8(0x123, 0x1FF)

    assert memory.load8(0x123) == 0xFF


def test_load16_is_big_endian() -> None:
    memory = Memory()
    memory.store8(0x200, 0xA2)
    memory.store8(0x201, 0xF0)

    assert memory.load16(0x200) == 0xA2F0


def test_out_of_range_access_raises() -> None:
    memory = Memory(0x200, 0x10)

    with pytest.raises(MemoryError):
        memory.load8(0x1FF)
    with pytest.raises(MemoryError):
        memory.store8(0x210, 0)


def test_load_image_copies_bytes() -> None:
    memory = Memory()
    memory.load_image(0x200, b"\x01\x02\x03")

    assert memory.snapshot()[0x200:0x203] == b"\x01\x02\x03"


def test_load_image_rejects_overflow() -> None:
    memory = Memory()

    with pytest.raises(MemoryError):
        memory.load_image(0xFFE, b"\x01\x02\x03")


def test_clear_zero_fills() -> None:
    memory = Memory()
    memory.store8(0x050, 0xF0)
    memory.clear()

    assert memory.load8(0x050) == 0


def test_invalid_region_is_rejected() -> None:
    with pytest.raises(MemoryError):
        Memory(0, 0)


def test_mask12_wraps_addresses() -> None:
    assert mask12(0x1000) == 0x000
    assert mask12(0x1FFF) == 0xFFF
    assert mask12(0x0ABC) == 0xABC
