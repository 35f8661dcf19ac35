"""Raw bar output: binary words or delimited ASCII numbers."""

from __future__ import annotations

import os
import struct
from typing import BinaryIO, Sequence


def _delim(value) -> bytes:
    if isinstance(value, int):
        return bytes([value & 0xFF])
    encoded = str(value).encode("latin-1")
    if len(encoded) != 1:
        raise ValueError(f"delimiter must be a single character, got {value!r}")
    return encoded


def format_raw(
    bars: Sequence[int],
    is_binary: bool,
    bit_format: int,
    ascii_range: int,
    bar_delim,
    frame_delim,
) -> bytes:
    """Encode one frame of bar heights."""
    if is_binary:
        limit = 2**bit_format - 1
        out = bytearray()
        for value in bars:
            value = min(value, limit)
            if bit_format == 16:
                out += struct.pack("<H", value & 0xFFFF)
            elif bit_format == 8:
                out += struct.pack("<B", value & 0xFF)
        return bytes(out)

    bar_sep = _delim(bar_delim)
    numbers = b"".join(
        str(min(value, ascii_range)).encode("ascii") + bar_sep for value in bars
    )
    return numbers + _delim(frame_delim)


def _write(out, data: bytes) -> None:
    if isinstance(out, int):
        os.write(out, data)
    else:
        out.write(data)


def print_raw_out(
    out: BinaryIO | int,
    bars: Sequence[int],
    is_binary: bool,
    bit_format: int,
    ascii_range: int,
    bar_delim,
    frame_delim,
) -> None:
    """Write one encoded frame to a binary stream or file descriptor."""
    _write(out, format_raw(bars, is_binary, bit_format, ascii_range, bar_delim, frame_delim))