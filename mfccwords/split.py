"""Locate spoken words in a PCM stream by per-block standard deviation."""

import numpy as np

from .frame import N

LEN_PART_MIN = 10
LEN_MIN = 20


def split(samples):
    """Return the segments of ``samples`` that hold speech, as int16 arrays."""
    data = np.asarray(samples, dtype=np.int16).ravel()
    count = len(data) // N
    if count == 0:
        return []
    blocks = data[: count * N].reshape(count, N).astype(np.float64)
    means = blocks.mean(axis=1, keepdims=True)
    sds = np.sqrt(((blocks - means) ** 2).sum(axis=1)) / (N - 1)
    sd_mean = sds.mean()

    signals = []
    started = False
    start_pos = len_sig = len_nothing = 0
    last = count - 1
    for i, sd in enumerate(sds):
        if sd_mean < sd:
            if not started:
                started = True
                start_pos = i
                len_nothing = 0
            len_sig += 1
        elif len_sig > LEN_PART_MIN:
            len_nothing = 0
            len_sig = 0
        else:
            len_nothing += 1
            # Before block LEN_MIN the minimum-length test always passes.
            long_enough = i < LEN_MIN or i - LEN_MIN > start_pos
            if started and long_enough and (len_nothing > 2 * LEN_MIN or i == last):
                signals.append(data[start_pos * N : i * N].copy())
                started = False
    return signals