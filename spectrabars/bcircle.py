"""A curses view drawing a circle whose size follows one bar."""

from __future__ import annotations

import contextlib
import curses
import math
import subprocess
import sys
from typing import Sequence

_DOT = "\u2588"


def circle_points(value: int, lines: int, cols: int) -> list[tuple[int, int]]:
    """Return the ``(y, x)`` cells of the circle for a bar ``value``, one per degree."""
    width = float(int(value / 10))
    height = float(int(value / 15))
    oy = int(lines // 2 - height / 2)
    ox = int(cols // 2 - width / 2)
    points = []
    for deg in range(360):
        angle = deg * (180.0 / math.pi)
        x = int(ox + width + int(width * math.cos(angle)))
        y = int(oy + height + int(height * math.sin(angle)))
        points.append((y, x))
    return points


def _run(command: str) -> None:
    subprocess.run(command, shell=True, check=False)


class CircleTerminal:
    """Draws the circle on a curses screen."""

    def __init__(self, screen, col: int, bgcol: int) -> None:
        self.screen = screen
        with contextlib.suppress(curses.error):
            curses.curs_set(0)
        screen.timeout(0)
        curses.noecho()
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(1, col, bgcol)
        if bgcol != -1:
            screen.bkgd(" ", curses.color_pair(1))
        screen.attron(curses.color_pair(1))

    def dimensions(self) -> tuple[int, int]:
        """Return ``(width, height)`` of the screen and clear it."""
        height, width = self.screen.getmaxyx()
        self.screen.clear()
        return width, height

    def _put(self, y: int, x: int, text: str) -> None:
        with contextlib.suppress(curses.error):
            self.screen.addstr(y, x, text)

    def draw(self, tty: bool, height: int, width: int, bars: Sequence[int]) -> bool:
        """Draw the circle for ``bars[1]``.

        Returns False, drawing nothing, when the screen was resized.
        """
        if len(bars) < 2:
            raise ValueError("the circle needs at least two bars")
        lines, cols = self.screen.getmaxyx()
        if not tty and (lines, cols) != (height, width):
            return False
        for y in range(lines):
            for x in range(cols):
                self._put(y, x, " ")
        for y, x in circle_points(bars[1], lines, cols):
            self._put(y, x, _DOT)
        self.screen.refresh()
        return True

    def cleanup(self) -> None:
        """Restore echo and the console font, end curses and clear the screen."""
        curses.echo()
        if sys.platform.startswith("freebsd"):
            _run("vidcontrol -f >/dev/null 2>&1")
        else:
            _run("setfont >/dev/null 2>&1")
            _run("setfont /usr/share/consolefonts/Lat2-Fixed16.psf.gz  >/dev/null 2>&1")
            _run("setterm -blank 10")
        curses.endwin()
        _run("clear")