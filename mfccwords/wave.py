"""Reading and writing the mono 16-bit PCM wave files the recogniser works with."""

import struct
from pathlib import Path

import numpy as np

WAVE_FORMAT = 0x0001
"""Format tag for uncompressed PCM."""

CHANNELS = 1
SAMPLE_RATE = 48000
BITS_PER_SAMPLE = 16
FRAME_SIZE = (BITS_PER_SAMPLE + 7) // 8 * CHANNELS
BYTES_PER_SECOND = SAMPLE_RATE * FRAME_SIZE

_CHUNK_HEADER = struct.Struct("<4sI")
_FMT = struct.Struct("<HHIIHH")


class WaveFormatError(ValueError):
    """Raised when a file is not a wave file in the expected format."""


def _chunks(data):
    offset = 12
    while offset + _CHUNK_HEADER.size <= len(data):
        chunk_id, size = _CHUNK_HEADER.unpack_from(data, offset)
        start = offset + _CHUNK_HEADER.size
        yield chunk_id, data[start : start + size]
        offset = start + size + (size & 1)


def _check_format(body):
    if len(body) < _FMT.size:
        raise WaveFormatError("fmt chunk is too short")
    tag, channels, rate, _byte_rate, _align, bits = _FMT.unpack_from(body)
    expected = (WAVE_FORMAT, CHANNELS, SAMPLE_RATE, BITS_PER_SAMPLE)
    if (tag, channels, rate, bits) != expected:
        raise WaveFormatError(
            f"unsupported format: tag={tag} channels={channels} "
            f"rate={rate} bits={bits}"
        )


def read_wave(path):
    """Return the samples of the first PCM data chunk of ``path`` as int16.

    Raises ``OSError`` if the file cannot be read and ``WaveFormatError``
    if its header is not a mono 16-bit PCM header at the expected rate.
    """
    data = Path(path).read_bytes()
    if len(data) < 12 or data[:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise WaveFormatError(f"{path}: not a RIFF/WAVE file")
    format_seen = False
    for chunk_id, body in _chunks(data):
        if chunk_id == b"fmt ":
            _check_format(body)
            format_seen = True
        elif chunk_id == b"data":
            if not format_seen:
                raise WaveFormatError(f"{path}: data chunk before fmt chunk")
            usable = len(body) - len(body) % FRAME_SIZE
            return np.frombuffer(body[:usable], dtype="<i2").astype(np.int16)
    raise WaveFormatError(f"{path}: no data chunk")


def write_wave(path, samples):
    """Write ``samples`` as a mono 16-bit PCM wave file, replacing ``path``."""
    pcm = np.asarray(samples, dtype="<i2").ravel().tobytes()
    header = struct.pack(
        "<4sI4s4sI",
        b"RIFF",
        4 + _CHUNK_HEADER.size + _FMT.size + _CHUNK_HEADER.size + len(pcm),
        b"WAVE",
        b"fmt ",
        _FMT.size,
    )
    header += _FMT.pack(
        WAVE_FORMAT, CHANNELS, SAMPLE_RATE, BYTES_PER_SECOND, FRAME_SIZE, BITS_PER_SAMPLE
    )
    header += _CHUNK_HEADER.pack(b"data", len(pcm))
    with open(path, "wb") as stream:
        stream.write(header)
        stream.write(pcm)