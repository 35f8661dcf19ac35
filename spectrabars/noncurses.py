"""Bar drawing on a plain terminal using ANSI escape sequences only."""

from __future__ import annotations

import contextlib
import os
import shutil
import subprocess
import sys
from typing import Sequence, TextIO

from .colors import RGB, build_gradient, parse_color
from .orientation import Orientation

try:
    import termios
except ImportError:  # not available on Windows
    termios = None

_BOTTOM_GLYPHS = (
    "\u2588",
    "\u2581",
    "\u2582",
    "\u2583",
    "\u2584",
    "\u2585",
    "\u2586",
    "\u2587",
)
_TOP_GLYPHS = (
    "\u2588",
    "\u2594",
    "\U0001FB82",
    "\U0001FB83",
    "\u2580",
    "\U0001FB84",
    "\U0001FB85",
    "\U0001FB86",
)
# Characters of the console font that are remapped to partial blocks.
_TTY_GLYPHS = "HABCDEFG"

_ECHO_ERRORS: tuple[type[BaseException], ...] = (
    (OSError, termios.error) if termios is not None else (OSError,)
)


def set_echo(fd: int, enabled: bool) -> None:
    """Switch echo and canonical input on or off for the terminal ``fd``.

    With echo off, reads return immediately even when nothing was typed.
    Raises ``termios.error`` when ``fd`` is not a terminal.
    """
    if termios is None:
        return
    attrs = termios.tcgetattr(fd)
    flags = termios.ECHO | termios.ECHOE | termios.ECHOK | termios.ECHONL | termios.ICANON
    if enabled:
        attrs[3] |= flags
    else:
        attrs[3] &= ~flags
    attrs[6][termios.VTIME] = 0
    attrs[6][termios.VMIN] = 1 if enabled else 0
    termios.tcsetattr(fd, termios.TCSANOW, attrs)


def get_terminal_dim() -> tuple[int, int]:
    """Return the terminal size as ``(width, lines)``."""
    size = shutil.get_terminal_size()
    return size.columns, size.lines


def _run(command: str) -> None:
    subprocess.run(command, shell=True, check=False)


def _stdin_fd() -> int | None:
    try:
        return sys.stdin.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _set_stdin_echo(enabled: bool) -> None:
    fd = _stdin_fd()
    if fd is None:
        return
    with contextlib.suppress(*_ECHO_ERRORS):
        set_echo(fd, enabled)


def _hex_color(text: str) -> RGB:
    color = parse_color(text)
    if color is None:
        raise ValueError(f"expected a #rrggbb color, got {text!r}")
    return color


def _rgb_escape(color: RGB) -> str:
    red, green, blue = color
    return f"\033[38;2;{red};{green};{blue}m"


class NoncursesTerminal:
    """Draws bars by emitting only the cells that changed since the last frame."""

    def __init__(
        self,
        tty: bool,
        fg_color: str,
        bg_color: str,
        col: int,
        bgcol: int,
        gradient: bool,
        gradient_colors: Sequence[str],
        width: int,
        lines: int,
        bar_width: int,
        orientation: Orientation = Orientation.BOTTOM,
        stream: TextIO | None = None,
    ) -> None:
        if bar_width < 0:
            raise ValueError("bar_width must not be negative")
        self.tty = bool(tty)
        self.fg_color = fg_color
        self.bg_color = bg_color
        self.col = col
        self.bgcol = bgcol
        self.gradient = bool(gradient)
        self.width = width
        self.lines = lines
        self.bar_width = bar_width
        self.orientation = Orientation(orientation)
        self.stream = stream

        if self.gradient:
            rows = lines // 2 if self.orientation.is_split else lines
            self.gradient_colors: list[RGB] = build_gradient(gradient_colors, rows)
        else:
            self.gradient_colors = []

        if self.tty:
            self._bottom = tuple(glyph * bar_width for glyph in _TTY_GLYPHS)
            self._top = self._bottom
        else:
            self._bottom = tuple(glyph * bar_width for glyph in _BOTTOM_GLYPHS)
            self._top = tuple(glyph * bar_width for glyph in _TOP_GLYPHS)
        self._space = " " * bar_width

    @property
    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def setup(self) -> None:
        """Clear the screen, set colors, paint the background and turn echo off."""
        if os.name == "nt":
            _run("cls")
        else:
            if not sys.platform.startswith("freebsd"):
                _run("setterm -cursor off")
            _run("clear")

        out = self._out
        out.write("\033[0m\n")

        col = self.col + 30
        if col == 38:
            out.write(_rgb_escape(_hex_color(self.fg_color)))
        elif 30 <= col < 38:
            out.write(f"\033[{col}m")

        if self.bgcol != 0:
            bgcol = self.bgcol + 40
            if bgcol == 48:
                red, green, blue = _hex_color(self.bg_color)
                out.write(f"\033[48;2;{red};{green};{blue}m")
            else:
                out.write(f"\033[{bgcol}m")
            row = " " * self.width
            out.write("\n".join([row] * (self.lines + 1)) + "\r")
            out.write(f"\033[{self.lines}A")

        out.flush()
        _set_stdin_echo(False)

    def _cell(self, value: int, top: bool) -> str:
        glyphs = self._top if top else self._bottom
        if value < 1:
            return self._space
        if value > 7:
            return glyphs[0]
        return glyphs[value]

    def render(
        self,
        lines: int,
        bars: Sequence[int],
        previous_frame: Sequence[int],
        bar_spacing: int,
        rest: int,
        offset: bool,
    ) -> str:
        """Build the escape sequence text that updates the screen to ``bars``.

        Returns an empty string when no line changed. Bars are in eighths of a
        line. Orientations other than TOP grow from the bottom.
        """
        if len(bars) != len(previous_frame):
            raise ValueError("bars and previous_frame must have the same length")
        top = self.orientation == Orientation.TOP
        if offset:
            lines //= 2

        parts: list[str] = []
        same_line = 0
        new_line = 0

        if top and offset:
            parts.append(f"\033[{lines}B")

        for current_line in range(lines - 1, -1, -1):
            level = lines - current_line - 1 if top else current_line

            if self.gradient and self.gradient_colors:
                color = self.gradient_colors[min(level, len(self.gradient_colors) - 1)]
                parts.append(_rgb_escape(color))

            same_bar = 0
            center_adjusted = False
            for value, previous in zip(bars, previous_frame):
                current_cell = value - level * 8
                prev_cell = previous - level * 8
                if (
                    (current_cell < 1 and prev_cell < 1)
                    or (current_cell > 7 and prev_cell > 7)
                    or current_cell == prev_cell
                ):
                    same_bar += 1
                    continue

                if same_line > 0:
                    parts.append(f"\033[{same_line}B")
                    new_line += same_line
                    same_line = 0
                if same_bar > 0:
                    parts.append(f"\033[{(self.bar_width + bar_spacing) * same_bar}C")
                    same_bar = 0
                if not center_adjusted and rest:
                    parts.append(f"\033[{rest}C")
                    center_adjusted = True

                parts.append(self._cell(current_cell, top))
                if bar_spacing:
                    parts.append(f"\033[{bar_spacing}C")

            if same_bar != len(bars):
                if current_line != 0:
                    parts.append("\n")
                    new_line += 1
            else:
                same_line += 1

        if top and offset:
            parts.append(f"\033[{lines}A")

        if same_line == lines:
            return ""
        return "".join(parts) + f"\r\033[{new_line}A"

    def draw(
        self,
        lines: int,
        width: int,
        bars: Sequence[int],
        previous_frame: Sequence[int],
        bar_spacing: int,
        rest: int,
        x_axis_info: bool,
        offset: bool,
    ) -> bool:
        """Write the update for one frame.

        Returns False, drawing nothing, when the terminal no longer has the
        expected size.
        """
        if not self.tty:
            expected_lines = lines + 1 if x_axis_info else lines
            if get_terminal_dim() != (width, expected_lines):
                return False
        frame = self.render(lines, bars, previous_frame, bar_spacing, rest, offset)
        if frame:
            out = self._out
            out.write(frame)
            out.flush()
        return True

    def cleanup(self) -> None:
        """Restore echo, cursor and console font, and clear the screen."""
        _set_stdin_echo(True)
        if os.name == "nt":
            _run("cls")
        else:
            if sys.platform.startswith("freebsd"):
                _run("vidcontrol -f >/dev/null 2>&1")
            else:
                _run("setfont  >/dev/null 2>&1")
                _run("setfont /usr/share/consolefonts/Lat2-Fixed16.psf.gz  >/dev/null 2>&1")
                _run("setterm -cursor on")
            _run("clear")
        out = self._out
        out.write("\033[0m\n")
        out.flush()