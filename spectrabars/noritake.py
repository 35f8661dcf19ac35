"""Bitmap output for Noritake 3000-series vacuum fluorescent displays."""

from __future__ import annotations

import os
from typing import BinaryIO, Sequence

_U64_MASK = (1 << 64) - 1


def _to_int8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value >= 0x80 else value


def format_ntk(
    bars: Sequence[int],
    bit_format: int,
    bar_width: int,
    bar_spacing: int,
    bar_height: int,
) -> bytes:
    """Encode bars as column bitmaps, most significant byte first."""
    rows = bar_height // 8
    limit = 2**bit_format - 1
    out = bytearray()
    for value in bars:
        value = min(value, limit)
        if rows > 0:
            level = _to_int8(value >> (rows - 1))
            bits = ((1 << level) - 1) & _U64_MASK if level > 0 else 0
            column = bytes((bits >> (8 * (rows - 1 - j))) & 0xFF for j in range(rows))
            out += column * bar_width
        out += bytes(rows * max(bar_spacing, 0))
    return bytes(out)


def print_ntk_out(
    out: BinaryIO | int,
    bars: Sequence[int],
    bit_format: int,
    bar_width: int,
    bar_spacing: int,
    bar_height: int,
) -> None:
    """Write the bitmap for one frame to a binary stream or file descriptor."""
    data = format_ntk(bars, bit_format, bar_width, bar_spacing, bar_height)
    if isinstance(out, int):
        os.write(out, data)
    else:
        out.write(data)