# spectrabars

Building blocks for a bar-graph audio spectrum visualizer: a thread-safe
sample buffer that audio sources feed, readers for a named pipe and for a
squeezelite-style shared memory area, and several ways to show one frame of
bar heights.

Install with `pip install .`; the tests need the `test` extra
(`pip install .[test]`, then `pytest`).

## Audio input

`spectrabars.audio.AudioData` is a dataclass holding the shared sample buffer
(`cava_in`) and the stream parameters: `format` (bits per sample), `rate`,
`channels`, `source`, `ieee_float`, `terminate` and a few more.

- `write_samples(samples, buf)` decodes `samples` little-endian samples from
  `buf` and appends them to the buffer. 8-bit samples are multiplied by 255,
  16-bit samples are taken as they are, 24/32-bit integers are divided by
  65535 and 32-bit floats (with `ieee_float` set) are multiplied by 65535.
  If the new samples would not fit behind those already buffered, the buffer
  is zeroed and filling starts again at the beginning. A `ValueError` is
  raised when `buf` is too short or `samples` exceeds the buffer size.
- `reset_output_buffers()` zeroes the buffer, `signal_threadparams()` sets
  `threadparams` to 0 and `signal_terminate()` sets `terminate`. All of these
  take the instance's lock.

Two readers fill an `AudioData` until `terminate` is set, so each is meant to
run in a thread of its own:

- `spectrabars.fifo.input_fifo(audio)` reads full buffers from the pipe named
  by `audio.source`, opened non-blocking with `open_fifo(path)`. When no data
  arrives for about a tenth of a second it clears the sample buffer and
  reopens the pipe.
- `spectrabars.shmem.input_shmem(audio)` maps the visualization area named by
  `audio.source` under `/dev/shm`, copies `rate` into `audio` and hands the
  samples on, or silence while the player is not running. `parse_vis(data)`
  decodes such an area into a `VisState`, and
  `vis_chunks(state, fftw_frames)` yields the sample blocks taken from it.

## Output

Every output takes a sequence of integer bar heights.

- `spectrabars.raw.format_raw(bars, is_binary, bit_format, ascii_range, bar_delim, frame_delim)`
  encodes one frame as little-endian 8- or 16-bit values (clipped to
  `2**bit_format - 1`), or as decimal numbers clipped to `ascii_range`, each
  followed by `bar_delim`, with `frame_delim` at the end.
  `print_raw_out(out, ...)` writes it to a binary stream or file descriptor.
- `spectrabars.noritake.format_ntk(bars, bit_format, bar_width, bar_spacing, bar_height)`
  builds column bitmaps for Noritake 3000-series VFD modules;
  `print_ntk_out(out, ...)` writes them.
- `spectrabars.noncurses.NoncursesTerminal` draws with ANSI escape sequences
  only. `setup()` clears the screen, sets colours and turns echo off;
  `render(...)` returns the text that updates only the cells that changed
  since the previous frame; `draw(...)` writes it and returns `False` when the
  terminal size no longer matches; `cleanup()` restores the terminal.
  `set_echo(fd, enabled)` and `get_terminal_dim()` are available on their own.
- `spectrabars.ncurses.NcursesTerminal` draws on a curses screen with
  eighth-cell block characters and optional colour gradients;
  `screen_coords`, `bar_glyph` and `gradient_rgb` are its helpers.
- `spectrabars.bcircle.CircleTerminal` draws, on a curses screen, a circle
  whose size follows the second bar; `circle_points(value, lines, cols)` gives
  its cells.
- `spectrabars.sdl.SdlWindow` paints bars in a resizable pygame window. Its
  `draw(...)` returns `DRAW_OK`, `DRAW_RESIZED` or `DRAW_QUIT` (on `q`,
  Escape or closing the window). `bar_rects(...)` gives the rectangles for a
  frame.

`spectrabars.orientation.Orientation` selects the edge bars grow from
(`BOTTOM`, `TOP`, `LEFT`, `RIGHT`, `SPLIT_H`, `SPLIT_V`). Colours are
`#rrggbb` strings: `spectrabars.colors.parse_color` reads one, and
`build_gradient(color_strings, lines)` spreads two to eight of them over a
number of lines.

The terminal outputs' `setup()`/`cleanup()` run shell commands such as
`clear`, `setterm` and `setfont` to reset the console.

## Example

```python
import sys

from spectrabars.audio import AudioData
from spectrabars.raw import format_raw, print_raw_out

audio = AudioData()
audio.write_samples(2, (1000).to_bytes(2, "little", signed=True) * 2)
print(audio.cava_in[:2])          # [1000.0, 1000.0]

print(format_raw([0, 12, 5000], False, 16, 1000, ";", "\n"))   # b'0;12;1000;\n'
print_raw_out(sys.stdout.buffer, [3, 65535], True, 8, 0, ";", "\n")
```

## What this package does not do

There is no command-line program and no configuration file handling. The
package does not turn samples into spectrum bars: it holds input samples and
displays bar heights it is given, but computing the bars from the buffer is
left to the caller. Audio can only be read from a named pipe or a shared
memory area; there is no capture from sound servers or sound cards.