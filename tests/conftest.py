"""Shared fixtures for building synthetic .job files."""

from __future__ import annotations

import struct
from typing import Callable

import pytest

# Encodes {01234567-89AB-CDEF-0123-456789ABCDEF}
UUID_BYTES = bytes.fromhex("67452301AB89EFCD0123456789ABCDEF")

DEFAULT_STRINGS = ("cmd.exe", "/c dir", "C:\\Windows", "admin", "nightly")


def _utf16_field(text: str, padding: int = 0) -> bytes:
    """Count-prefixed UTF-16 LE string with `padding` trailing NUL code units."""
    payload = text.encode("utf-16-le") + b"\x00\x00" * padding
    return struct.pack("<H", len(payload) // 2) + payload


def _build_job(
    product_info: int = 0x0601,
    file_version: int = 1,
    uuid: bytes = UUID_BYTES,
    priority: int = 0x20000000,
    max_run_time: int = 3_661_001,
    exit_code: int = 0,
    status: int = 0x41300,
    flags: int = 0,
    run_date: tuple[int, ...] = (2024, 8, 2, 6, 14, 5, 9),
    scheduled_year: int = 2024,
    strings: tuple[str, ...] = DEFAULT_STRINGS,
    trailer: bytes | None = None,
) -> bytes:
    """Build a .job buffer.

    The header runs to byte 70 (the scheduled date's year word); the
    trailer starts there, so the scheduled date's remaining words alias the
    first count prefix and name characters. The result is padded to the
    88-byte header window.
    """
    header = (
        struct.pack("<HH", product_info, file_version)
        + uuid
        + struct.pack("<6H", 0x46, 0x80, 3, 5, 10, 60)
        + struct.pack("<IiiiI", priority, max_run_time, exit_code, status, flags)
        + struct.pack("<8H", *run_date, 0)
        + struct.pack("<H", scheduled_year)
    )
    assert len(header) == 70
    if trailer is None:
        trailer = b"".join(_utf16_field(s) for s in strings)
    data = header + trailer
    return data.ljust(88, b"\x00")


@pytest.fixture
def job_bytes() -> bytes:
    """A well-formed .job buffer with default field values."""
    return _build_job()


@pytest.fixture
def uuid_bytes() -> bytes:
    """The 16 identifier bytes used by `build_job`."""
    return UUID_BYTES


@pytest.fixture
def utf16_field() -> Callable[..., bytes]:
    """Factory for count-prefixed UTF-16 LE strings."""
    return _utf16_field


@pytest.fixture
def build_job() -> Callable[..., bytes]:
    """Factory for .job buffers; keyword arguments override header fields."""
    return _build_job
