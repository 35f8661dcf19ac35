"""Audio input from the shared-memory visualization area of a network player."""

from __future__ import annotations

import mmap
import os
import struct
import time
from dataclasses import dataclass
from typing import Iterator

from .audio import AudioData

VIS_BUF_SIZE = 16384

# rwlock (56 bytes), buf_size, buf_index, running, rate, updated, buffer
_VIS = struct.Struct(f"=56xII?3xIq{VIS_BUF_SIZE}h")
VIS_SIZE = _VIS.size


@dataclass(frozen=True)
class VisState:
    """Snapshot of the shared visualization area."""

    buf_size: int
    buf_index: int
    running: bool
    rate: int
    updated: int
    buffer: tuple[int, ...]


def parse_vis(data) -> VisState:
    """Decode a visualization area from a bytes-like object."""
    if len(data) < VIS_SIZE:
        raise ValueError(f"visualization area needs {VIS_SIZE} bytes, got {len(data)}")
    buf_size, buf_index, running, rate, updated, *buffer = _VIS.unpack_from(data)
    return VisState(buf_size, buf_index, running, rate, updated, tuple(buffer))


def vis_chunks(state: VisState, fftw_frames: int) -> Iterator[tuple[int, ...]]:
    """Yield the blocks of samples handed on per reread of the area."""
    if fftw_frames <= 0:
        raise ValueError("fftw_frames must be positive")
    step = fftw_frames * 2
    buf_frames = state.buf_size // 2
    for start in range(0, buf_frames // step, step):
        chunk = state.buffer[start : start + step]
        yield chunk + (0,) * (step - len(chunk))


def _reread_delay(state: VisState) -> float:
    if state.rate == 0:
        return 0.0
    nanoseconds = (1_000_000 // state.rate) * (state.buf_size // 2)
    if not 0 <= nanoseconds < 1_000_000_000:
        return 0.0
    return nanoseconds / 1e9


def _shm_path(name: str) -> str:
    return os.path.join("/dev/shm", name.lstrip("/"))


def input_shmem(audio: AudioData) -> None:
    """Copy samples from the shared area named by ``audio.source`` until stopped."""
    fftw_frames = audio.input_buffer_size // 2
    count = fftw_frames * 2
    silence = bytes(count * 2)
    try:
        handle = open(_shm_path(audio.source), "rb")
    except OSError as exc:
        raise OSError(
            exc.errno, f"Could not open source '{audio.source}': {exc.strerror}"
        ) from exc
    with handle:
        try:
            area = mmap.mmap(handle.fileno(), VIS_SIZE, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as exc:
            raise OSError(
                "mmap failed - check if squeezelite is running with visualization enabled"
            ) from exc
        with area:
            while not audio.terminate:
                state = parse_vis(area)
                audio.rate = state.rate
                delay = _reread_delay(state)
                if state.running:
                    for chunk in vis_chunks(state, fftw_frames):
                        audio.write_samples(count, struct.pack(f"<{count}h", *chunk))
                else:
                    audio.write_samples(count, silence)
                time.sleep(delay)