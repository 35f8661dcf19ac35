"""Direction in which bars grow."""

from __future__ import annotations

from enum import IntEnum


class Orientation(IntEnum):
    """Bar orientation; values index the per-orientation glyph tables."""

    BOTTOM = 0
    TOP = 1
    LEFT = 2
    RIGHT = 3
    SPLIT_H = 4
    SPLIT_V = 5

    @property
    def is_horizontal(self) -> bool:
        """True when bars grow sideways, so screen width and height swap roles."""
        return self in (Orientation.LEFT, Orientation.RIGHT)

    @property
    def is_split(self) -> bool:
        """True when bars grow from the middle in both directions."""
        return self in (Orientation.SPLIT_H, Orientation.SPLIT_V)