"""Shared audio state filled by the input readers and consumed by the visualizer."""

from __future__ import annotations

import logging
import struct
import threading
from dataclasses import dataclass, field

# Number of samples to read from an audio source per channel.
BUFFER_SIZE = 512

_UCHAR_MAX = 255
_USHRT_MAX = 65535

log = logging.getLogger("spectrabars")


@dataclass
class AudioData:
    """Sample buffer and negotiated stream parameters shared between threads."""

    input_buffer_size: int = BUFFER_SIZE * 2
    cava_buffer_size: int = BUFFER_SIZE * 16
    format: int = 16
    rate: int = 44100
    channels: int = 2
    threadparams: int = 1
    source: str = ""
    input_method: str = ""
    terminate: bool = False
    error_message: str = ""
    samples_counter: int = 0
    ieee_float: bool = False
    autoconnect: int = 0
    cava_in: list[float] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.cava_in:
            self.cava_in = [0.0] * self.cava_buffer_size

    def write_samples(self, samples: int, buf: bytes) -> None:
        """Decode ``samples`` raw samples from ``buf`` and append them to the buffer.

        If the new samples do not fit behind what is already buffered, the buffer
        is cleared and filling starts over from the beginning.
        """
        if samples == 0:
            return
        data = bytes(buf)
        width = self.format // 8
        with self.lock:
            if samples > self.cava_buffer_size:
                raise ValueError(
                    f"{samples} samples do not fit a buffer of {self.cava_buffer_size}"
                )
            decoded = list(self._decode(data, samples, width))
            if self.samples_counter + samples > self.cava_buffer_size:
                self.cava_in[: self.cava_buffer_size] = [0.0] * self.cava_buffer_size
                self.samples_counter = 0
            start = self.samples_counter
            self.cava_in[start : start + samples] = decoded
            self.samples_counter += samples

    def _decode(self, data: bytes, samples: int, width: int):
        if width >= 1 and len(data) < samples * width:
            raise ValueError(f"buffer holds {len(data)} bytes, {samples * width} needed")
        try:
            for offset in (i * width for i in range(samples)):
                if width == 1:
                    yield float(struct.unpack_from("<b", data, offset)[0] * _UCHAR_MAX)
                elif width in (3, 4):
                    chunk = data[offset : offset + 4].ljust(4, b"\0")
                    if self.ieee_float:
                        yield struct.unpack("<f", chunk)[0] * _USHRT_MAX
                    else:
                        yield struct.unpack("<i", chunk)[0] / _USHRT_MAX
                else:
                    yield float(struct.unpack_from("<h", data, offset)[0])
        except struct.error as exc:
            raise ValueError(f"buffer too short for {samples} samples") from exc

    def reset_output_buffers(self) -> None:
        """Zero the whole sample buffer."""
        with self.lock:
            self.cava_in[: self.cava_buffer_size] = [0.0] * self.cava_buffer_size

    def signal_threadparams(self) -> None:
        """Tell the main thread that the input parameters are final."""
        with self.lock:
            self.threadparams = 0

    def signal_terminate(self) -> None:
        """Ask the input thread to stop."""
        with self.lock:
            self.terminate = True