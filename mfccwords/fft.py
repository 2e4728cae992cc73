"""Discrete Fourier transform with the scaling used by the feature extractor."""

import numpy as np


def fft(values):
    """Return the DFT of ``values`` divided by its length and conjugated.

    The length must be a power of two. A single value is returned unchanged.
    """
    data = np.asarray(values, dtype=complex)
    if data.ndim != 1:
        raise ValueError("fft expects a one-dimensional sequence")
    n = data.size
    if n == 0 or n & (n - 1):
        raise ValueError(f"length must be a power of two, got {n}")
    if n == 1:
        return data.copy()
    return np.conj(np.fft.fft(data)) / n