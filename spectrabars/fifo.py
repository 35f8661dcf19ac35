"""Audio input from a named pipe delivering raw interleaved samples."""

from __future__ import annotations

import os
import time

from .audio import AudioData

_IDLE_SLEEP = 0.01
_IDLE_LIMIT = 10
_TEST_MODE_SLEEP = 0.001


def open_fifo(path: str) -> int:
    """Open ``path`` for reading and switch the descriptor to non-blocking mode."""
    fd = os.open(path, os.O_RDONLY)
    os.set_blocking(fd, False)
    return fd


def _read_some(fd: int, size: int) -> bytes:
    try:
        return os.read(fd, size)
    except BlockingIOError:
        return b""


def input_fifo(audio: AudioData) -> None:
    """Read full buffers from the pipe into ``audio`` until it is told to stop.

    When no data arrives for a while the shared buffer is cleared and the pipe
    is reopened.
    """
    size = audio.input_buffer_size * audio.format // 8
    test_mode = audio.source == "/dev/zero"
    fd: int | None = open_fifo(audio.source)
    try:
        while not audio.terminate:
            buf = bytearray()
            idle = 0
            while len(buf) < size:
                chunk = _read_some(fd, size - len(buf))
                if not chunk:
                    time.sleep(_IDLE_SLEEP)
                    idle += 1
                    if idle > _IDLE_LIMIT:
                        audio.reset_output_buffers()
                        os.close(fd)
                        fd = None
                        fd = open_fifo(audio.source)
                        idle = 0
                        buf.clear()
                else:
                    buf += chunk
                    idle = 0
            audio.write_samples(audio.input_buffer_size, buf)
            if test_mode:
                time.sleep(_TEST_MODE_SLEEP)
    finally:
        if fd is not None:
            os.close(fd)