import io
import os
import termios
from unittest import mock

import pytest

from spectrabars.colors import parse_color
from spectrabars.noncurses import NoncursesTerminal, get_terminal_dim, set_echo
from spectrabars.orientation import Orientation


def make_terminal(tty=True, bar_width=2, lines=4, width=20, orientation=Orientation.BOTTOM,
                  gradient=False, gradient_colors=(), col=7, bgcol=0, stream=None,
                  fg_color="#ff0000", bg_color="#000000"):
    return NoncursesTerminal(
        tty, fg_color, bg_color, col, bgcol, gradient, list(gradient_colors),
        width, lines, bar_width, orientation, stream if stream is not None else io.StringIO(),
    )


def test_unchanged_frame_renders_nothing():
    term = make_terminal()
    assert term.render(4, [5, 17, 30], [5, 17, 30], 1, 0, False) == ""


def test_full_tty_bar_single_line():
    term = make_terminal(bar_width=2, lines=1)
    assert term.render(1, [8], [0], 0, 0, False) == "HH\r\033[0A"


def test_skipped_bars_move_cursor_forward():
    term = make_terminal(bar_width=1, lines=1)
    frame = term.render(1, [0, 8], [0, 0], 1, 0, False)
    assert frame.startswith("\033[2CH")


def test_cursor_returns_up_by_newlines():
    term = make_terminal(bar_width=1, lines=3)
    frame = term.render(3, [24, 24], [0, 0], 0, 0, False)
    assert frame.endswith(f"\r\033[{frame.count(chr(10))}A")
    assert frame.count("H") == 6


def test_bottom_and_top_glyphs():
    bottom = make_terminal(tty=False, bar_width=3, lines=1)
    top = make_terminal(tty=False, bar_width=3, lines=1, orientation=Orientation.TOP)
    assert "\u2584" * 3 in bottom.render(1, [4], [0], 0, 0, False)
    assert "\u2580" * 3 in top.render(1, [4], [0], 0, 0, False)


def test_shrinking_bar_writes_spaces():
    term = make_terminal(tty=False, bar_width=3, lines=1)
    frame = term.render(1, [0], [8], 0, 0, False)
    assert frame.startswith(" " * 3)


def test_top_offset_moves_down_then_up():
    term = make_terminal(tty=False, bar_width=1, lines=2, orientation=Orientation.TOP)
    frame = term.render(2, [8], [0], 0, 0, True)
    assert frame.startswith("\033[1B")
    assert "\033[1A\r" in frame


def test_gradient_escape_per_line():
    term = make_terminal(lines=2, gradient=True, gradient_colors=["#000000", "#ffffff"])
    assert len(term.gradient_colors) == 2
    frame = term.render(2, [16], [0], 0, 0, False)
    for color in term.gradient_colors:
        red, green, blue = color
        assert f"\033[38;2;{red};{green};{blue}m" in frame


def test_gradient_halved_for_split():
    term = make_terminal(lines=10, gradient=True, gradient_colors=["#000000", "#ffffff"],
                         orientation=Orientation.SPLIT_H)
    assert len(term.gradient_colors) == 5
    assert term.gradient_colors[-1] == parse_color("#ffffff")


def test_gradient_needs_two_colors():
    with pytest.raises(ValueError):
        make_terminal(gradient=True, gradient_colors=["#000000"])


def test_mismatched_frames_rejected():
    term = make_terminal()
    with pytest.raises(ValueError):
        term.render(4, [1, 2], [1], 0, 0, False)


def test_setup_writes_colors_and_background():
    stream = io.StringIO()
    term = make_terminal(col=8, bgcol=1, width=5, lines=3, stream=stream)
    with mock.patch("subprocess.run") as run, mock.patch("termios.tcsetattr"):
        term.setup()
    text = stream.getvalue()
    red, green, blue = parse_color("#ff0000")
    assert text.startswith("\033[0m\n")
    assert f"\033[38;2;{red};{green};{blue}m" in text
    assert (" " * 5 + "\n") * 3 + " " * 5 + "\r" in text
    assert text.endswith(f"\033[{3}A")
    assert run.called


def test_cleanup_resets_attributes():
    stream = io.StringIO()
    term = make_terminal(stream=stream)
    with mock.patch("subprocess.run") as run, mock.patch("termios.tcsetattr"):
        term.cleanup()
    assert stream.getvalue().endswith("\033[0m\n")
    assert run.call_args_list[-1].args[0] == "clear"


def test_draw_detects_resize(monkeypatch):
    monkeypatch.setenv("COLUMNS", "80")
    monkeypatch.setenv("LINES", "24")
    assert get_terminal_dim() == (80, 24)
    stream = io.StringIO()
    term = make_terminal(tty=False, bar_width=1, lines=24, width=80, stream=stream)
    assert term.draw(20, 80, [8], [0], 0, 0, False, False) is False
    assert stream.getvalue() == ""
    assert term.draw(23, 80, [8], [0], 0, 0, True, False) is True
    assert stream.getvalue() == term.render(23, [8], [0], 0, 0, False)


def test_draw_tty_writes_frame():
    stream = io.StringIO()
    term = make_terminal(tty=True, bar_width=1, lines=2, stream=stream)
    assert term.draw(2, 10, [9], [0], 0, 0, False, False) is True
    assert stream.getvalue() == term.render(2, [9], [0], 0, 0, False)


def test_set_echo_toggles_flags():
    master, slave = os.openpty()
    try:
        set_echo(slave, False)
        attrs = termios.tcgetattr(slave)
        assert attrs[3] & termios.ECHO == 0
        assert attrs[3] & termios.ICANON == 0
        set_echo(slave, True)
        attrs = termios.tcgetattr(slave)
        assert attrs[3] & termios.ECHO
        assert attrs[3] & termios.ICANON
    finally:
        os.close(master)
        os.close(slave)


def test_set_echo_on_pipe_fails():
    read_fd, write_fd = os.pipe()
    try:
        with pytest.raises(termios.error):
            set_echo(read_fd, False)
    finally:
        os.close(read_fd)
        os.close(write_fd)