import struct
import threading

import pytest

from spectrabars.audio import AudioData


def make(size=8, fmt=16, ieee=False):
    return AudioData(cava_buffer_size=size, format=fmt, ieee_float=ieee)


def test_buffer_starts_zeroed():
    audio = make(size=6)
    assert audio.cava_in == [0.0] * 6
    assert audio.samples_counter == 0


def test_16_bit_samples_are_stored_as_is():
    audio = make()
    audio.write_samples(3, struct.pack("<3h", 1, -2, 3))
    assert audio.cava_in[:3] == [1.0, -2.0, 3.0]
    assert audio.samples_counter == 3


def test_samples_append_after_previous_write():
    audio = make()
    audio.write_samples(2, struct.pack("<2h", 5, 6))
    audio.write_samples(2, struct.pack("<2h", 7, 8))
    assert audio.cava_in[:4] == [5.0, 6.0, 7.0, 8.0]
    assert audio.samples_counter == 4


def test_overflow_discards_buffer_and_starts_over():
    audio = make(size=4)
    audio.write_samples(3, struct.pack("<3h", 1, 2, 3))
    audio.write_samples(2, struct.pack("<2h", 9, 10))
    assert audio.cava_in == [9.0, 10.0, 0.0, 0.0]
    assert audio.samples_counter == 2


def test_8_bit_samples_scaled_by_uchar_max():
    audio = make(fmt=8)
    audio.write_samples(2, struct.pack("<2b", 2, -1))
    assert audio.cava_in[:2] == [2 * 255.0, -255.0]


def test_32_bit_int_samples_scaled_down():
    audio = make(fmt=32)
    audio.write_samples(1, struct.pack("<i", 65535 * 3))
    assert audio.cava_in[0] == pytest.approx(3.0)


def test_32_bit_float_samples_scaled_up():
    audio = make(fmt=32, ieee=True)
    audio.write_samples(1, struct.pack("<f", 0.5))
    assert audio.cava_in[0] == pytest.approx(0.5 * 65535)


def test_zero_samples_is_noop():
    audio = make()
    audio.write_samples(0, b"")
    assert audio.samples_counter == 0


def test_short_buffer_raises():
    audio = make()
    with pytest.raises(ValueError):
        audio.write_samples(4, b"\x00\x01")


def test_too_many_samples_raises():
    audio = make(size=2)
    with pytest.raises(ValueError):
        audio.write_samples(3, bytes(6))


def test_reset_output_buffers_zeroes():
    audio = make(size=3)
    audio.write_samples(3, struct.pack("<3h", 4, 5, 6))
    audio.reset_output_buffers()
    assert audio.cava_in == [0.0, 0.0, 0.0]


def test_signals():
    audio = make()
    assert audio.threadparams == 1
    audio.signal_threadparams()
    audio.signal_terminate()
    assert audio.threadparams == 0
    assert audio.terminate is True


def test_concurrent_writes_keep_counter_consistent():
    audio = make(size=1000)
    payload = struct.pack("<h", 1)

    def worker():
        for _ in range(100):
            audio.write_samples(1, payload)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert audio.samples_counter == 400
    assert sum(audio.cava_in) == 400.0