import os
import struct
import threading
import time

import pytest

from spectrabars.audio import AudioData
from spectrabars.fifo import input_fifo, open_fifo


def test_open_fifo_is_non_blocking(tmp_path):
    path = tmp_path / "data"
    path.write_bytes(b"abc")
    fd = open_fifo(str(path))
    try:
        assert os.get_blocking(fd) is False
        assert os.read(fd, 3) == b"abc"
    finally:
        os.close(fd)


def test_open_fifo_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_fifo(str(tmp_path / "missing"))


def test_input_fifo_fills_buffer_until_terminated(tmp_path):
    values = (10, -20, 30, -40)
    path = tmp_path / "samples"
    path.write_bytes(struct.pack("<4h", *values))
    audio = AudioData(
        input_buffer_size=4, cava_buffer_size=8, format=16, source=str(path)
    )
    thread = threading.Thread(target=input_fifo, args=(audio,), daemon=True)
    thread.start()
    deadline = time.monotonic() + 5
    while audio.samples_counter == 0 and time.monotonic() < deadline:
        time.sleep(0.01)
    audio.signal_terminate()
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert audio.cava_in[:4] == [float(v) for v in values]
    assert audio.samples_counter in (4, 8)