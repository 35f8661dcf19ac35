"""Hex color parsing and vertical color gradients."""

from __future__ import annotations

import re
import struct
from typing import Sequence

MAX_GRADIENT_COLOR_DEFS = 8

RGB = tuple[int, int, int]

_HEX = re.compile(r"#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")


def parse_color(color_string: str) -> RGB | None:
    """Parse ``#rrggbb``; return None for strings that are not hex colors."""
    if not color_string.startswith("#"):
        return None
    match = _HEX.match(color_string)
    if match is None:
        raise ValueError(f"invalid color: {color_string!r}")
    red, green, blue = (int(part, 16) for part in match.groups())
    return red, green, blue


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def build_gradient(color_strings: Sequence[str], lines: int) -> list[RGB]:
    """Spread the given colors over ``lines`` rows, first color at row 0."""
    defs = []
    for text in color_strings:
        color = parse_color(text)
        if color is None:
            raise ValueError(f"gradient colors must be hex colors, got {text!r}")
        defs.append(color)
    if len(defs) < 2:
        raise ValueError("a gradient needs at least two colors")
    if len(defs) > MAX_GRADIENT_COLOR_DEFS:
        raise ValueError(f"at most {MAX_GRADIENT_COLOR_DEFS} gradient colors are supported")
    if lines <= 0:
        return []

    segments = len(defs) - 1
    base = lines // segments
    rest = _f32(_f32(lines / segments) - base)
    rest_total = 0.0
    gradient: list[RGB] = []
    for low, high in zip(defs, defs[1:]):
        size = base
        if rest_total > 1.0:
            size += 1
            rest_total = _f32(rest_total - 1.0)
        for n in range(size):
            fraction = _f32(n / size)
            gradient.append(
                tuple(
                    int(_f32(lo + _f32((hi - lo) * fraction))) for lo, hi in zip(low, high)
                )
            )
        rest_total = _f32(rest_total + rest)

    gradient = gradient[:lines]
    gradient += [defs[-1]] * (lines - len(gradient))
    gradient[-1] = defs[-1]
    return gradient