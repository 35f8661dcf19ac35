"""Bar drawing on a curses screen with eighth-cell resolution."""

from __future__ import annotations

import contextlib
import curses
import subprocess
import sys
from typing import Sequence

from .colors import RGB, parse_color
from .orientation import Orientation

NUM_BAR_HEIGHTS = 8
MAX_COLOR_REDEFINITION = 256
FIRST_GRADIENT_PAIR = 16

_BAR_GLYPHS = {
    Orientation.BOTTOM: (
        "\u2581", "\u2582", "\u2583", "\u2584", "\u2585", "\u2586", "\u2587", "\u2588",
    ),
    Orientation.TOP: (
        "\u2594", "\U0001FB82", "\U0001FB83", "\u2580",
        "\U0001FB84", "\U0001FB85", "\U0001FB86", "\u2588",
    ),
    Orientation.LEFT: (
        "\u258F", "\u258E", "\u258D", "\u258C", "\u258B", "\u258A", "\u2589", "\u2588",
    ),
    Orientation.RIGHT: (
        "\u2595", "\U0001FB87", "\U0001FB88", "\u2590",
        "\U0001FB89", "\U0001FB8A", "\U0001FB8B", "\u2588",
    ),
}


def screen_coords(line: int, col: int, max_value: int, orientation: Orientation) -> tuple[int, int]:
    """Map a bar ``line`` and screen ``col`` to ``(x, y)`` for the orientation."""
    orientation = Orientation(orientation)
    if orientation == Orientation.LEFT:
        return line, col
    if orientation == Orientation.RIGHT:
        return max_value - line, col
    if orientation == Orientation.TOP:
        return col, line
    return col, max_value - line


def bar_glyph(orientation: Orientation, step: int) -> str:
    """Return the block character filling ``step + 1`` eighths of a cell."""
    if not 0 <= step < NUM_BAR_HEIGHTS:
        raise ValueError(f"step must be in 0..{NUM_BAR_HEIGHTS - 1}, got {step}")
    glyphs = _BAR_GLYPHS.get(Orientation(orientation), _BAR_GLYPHS[Orientation.BOTTOM])
    return glyphs[step]


def _through_hex(color: Sequence[int]) -> RGB:
    # Colors pass through a "#rrggbb" string; wider values lose their tail digits.
    text = "".join(f"{value:02x}" for value in color)
    return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)


def gradient_rgb(gradient_colors: Sequence[str], gradient_size: int) -> list[RGB]:
    """Compute one color per gradient pair, starting at the first given color."""
    anchors = []
    for text in gradient_colors:
        color = parse_color(text)
        if color is None:
            raise ValueError(f"gradient colors must be hex colors, got {text!r}")
        anchors.append(color)
    if len(anchors) < 2:
        raise ValueError("a gradient needs at least two colors")

    count = len(anchors)
    rgb = [[0, 0, 0] for _ in range(2 * count - 1)]
    for index, color in enumerate(anchors):
        rgb[2 * index] = list(color)

    size = max(gradient_size, 0) // (count - 1)
    result: list[RGB] = []
    for segment in range(count - 1):
        col = 2 * segment
        for j in range(size):
            fraction = j / (size * 0.85)
            for k in range(3):
                value = int(rgb[col][k] + (rgb[col + 2][k] - rgb[col][k]) * fraction) & 0xFFFF
                rgb[col + 1][k] = value
                if value > 255:
                    rgb[col][k] = 0
                if j > size * 0.85:
                    rgb[col + 1][k] = rgb[col + 2][k]
            result.append(_through_hex(rgb[col + 1]))

    last = _through_hex(rgb[2 * count - 2])
    result.extend([last] * (gradient_size - len(result)))
    return result


def _curses_level(value: int) -> int:
    # curses uses the range 0..1000 for color components
    return int(value * 1000.0 / 0xFF + 0.5)


def _run(command: str) -> None:
    subprocess.run(command, shell=True, check=False)


class NcursesTerminal:
    """Draws bars on a curses screen, touching only the cells that changed."""

    def __init__(
        self,
        screen,
        fg_color: str,
        bg_color: str,
        predef_fg_color: int,
        predef_bg_color: int,
        gradient: bool,
        gradient_colors: Sequence[str],
    ) -> None:
        self.screen = screen
        self.gradient_size = 64
        with contextlib.suppress(curses.error):
            curses.curs_set(0)
        screen.timeout(0)
        curses.noecho()
        curses.start_color()
        curses.use_default_colors()

        self.lines, self.width = screen.getmaxyx()
        screen.clear()

        pair = FIRST_GRADIENT_PAIR
        bg_number = self._change_color_definition(0, bg_color, predef_bg_color)

        if not gradient:
            fg_number = self._change_color_definition(1, fg_color, predef_fg_color)
            curses.init_pair(pair, fg_number, bg_number)
        else:
            size = self.lines
            if size > curses.COLORS:
                size = curses.COLORS - 1
            if size > curses.COLOR_PAIRS:
                size = curses.COLOR_PAIRS - 1
            if size > MAX_COLOR_REDEFINITION:
                size = MAX_COLOR_REDEFINITION - 1
            self.gradient_size = size

            for color in gradient_rgb(gradient_colors, size):
                self._define_color(pair, color)
                curses.init_pair(pair, pair, bg_number)
                pair += 1
            pair -= 1

        screen.attron(curses.color_pair(pair))
        if bg_number != -1:
            screen.bkgd(" ", curses.color_pair(pair))

        for y in range(self.lines):
            for x in range(self.width):
                self._put_char(y, x, ord(" "))
        screen.refresh()

    @staticmethod
    def _define_color(number: int, color: RGB) -> None:
        curses.init_color(number, *(_curses_level(value) for value in color))

    def _change_color_definition(self, number: int, color_string: str, predef: int) -> int:
        color = parse_color(color_string)
        if color is None:
            return predef
        if not curses.can_change_color():
            raise RuntimeError(
                "Your terminal can not change color definitions, "
                "please use one of the predefined colors."
            )
        self._define_color(number, color)
        return number

    def _put_char(self, y: int, x: int, code: int) -> None:
        with contextlib.suppress(curses.error):
            self.screen.addch(y, x, code)

    def _put_str(self, y: int, x: int, text: str) -> None:
        with contextlib.suppress(curses.error):
            self.screen.addstr(y, x, text)

    def dimensions(self) -> tuple[int, int]:
        """Return ``(width, height)`` of the screen and clear it."""
        height, width = self.screen.getmaxyx()
        self.gradient_size = height
        self.screen.clear()
        return width, height

    def change_colors(self, cur_height: int, tot_height: int) -> None:
        """Select the gradient color pair for line ``cur_height``."""
        size = max(self.gradient_size, 1)
        step = max(tot_height // size, 1)
        index = min(cur_height // step, size - 1)
        self.screen.attron(curses.color_pair(index + FIRST_GRADIENT_PAIR))

    def draw(
        self,
        is_tty: bool,
        dimension_value: int,
        dimension_bar: int,
        bar_width: int,
        bar_spacing: int,
        rest: int,
        bars: Sequence[int],
        previous_frame: Sequence[int],
        gradient: bool,
        x_axis_info: bool,
        orientation: Orientation,
    ) -> bool:
        """Update the screen from ``previous_frame`` to ``bars``.

        Returns False, drawing nothing, when the screen was resized.
        """
        if len(bars) != len(previous_frame):
            raise ValueError("bars and previous_frame must have the same length")
        orientation = Orientation(orientation)
        max_value = dimension_value - 1

        if not is_tty:
            value_extent = dimension_value + 1 if x_axis_info else dimension_value
            if orientation.is_horizontal:
                expected = (dimension_bar, value_extent)
            else:
                expected = (value_extent, dimension_bar)
            if self.screen.getmaxyx() != expected:
                return False

        highest = max((max(now, before) for now, before in zip(bars, previous_frame)), default=0)
        update_lines = (max(highest, 0) + NUM_BAR_HEIGHTS) // NUM_BAR_HEIGHTS

        for line in range(update_lines):
            if gradient:
                self.change_colors(line, max_value)

            for index, (value, previous) in enumerate(zip(bars, previous_frame)):
                if value == previous:
                    continue
                first_col = index * (bar_width + bar_spacing) + rest
                line_height = value // NUM_BAR_HEIGHTS
                previous_height = previous // NUM_BAR_HEIGHTS

                if value >= line * NUM_BAR_HEIGHTS + 1:
                    if line_height == line:
                        step = value % NUM_BAR_HEIGHTS - 1
                    elif previous_height <= line:
                        step = NUM_BAR_HEIGHTS - 1
                    else:
                        continue
                    for col in range(first_col, first_col + bar_width):
                        x, y = screen_coords(line, col, max_value, orientation)
                        if is_tty:
                            self._put_char(y, x, 0x41 + step)
                        else:
                            self._put_str(y, x, bar_glyph(orientation, step))
                elif previous_height >= line:
                    for col in range(first_col, first_col + bar_width):
                        x, y = screen_coords(line, col, max_value, orientation)
                        self._put_char(y, x, ord(" "))

        self.screen.refresh()
        return True

    def cleanup(self) -> None:
        """Restore echo and the console font, end curses and clear the screen."""
        curses.echo()
        if sys.platform.startswith("freebsd"):
            _run("vidcontrol -f >/dev/null 2>&1")
        else:
            _run("setfont  >/dev/null 2>&1")
            _run("setfont /usr/share/consolefonts/Lat2-Fixed16.psf.gz  >/dev/null 2>&1")
        self.screen.standend()
        curses.endwin()
        _run("clear")