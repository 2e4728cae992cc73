"""Windowed spectral frames and MFCC features."""

import math

import numpy as np

from .fft import fft

N = 512
"""Number of samples in each frame."""

N_FILTER = 26
"""Number of mel filters."""

N_MFCC = N_FILTER
"""Number of MFCC features per frame."""

OVERLAP = N // 8
_HOP = N - OVERLAP
_SAMPLE_RATE = 48000

# Centre frequencies of the asymmetric triangular filters; each filter spans
# from its left neighbour's centre to its right neighbour's centre.
MEL_FILTERS = (
    150, 200, 250, 300, 350, 400, 450,
    490, 560, 640, 730, 840, 960, 1100,
    1210, 1340, 1480, 1640, 1810, 2000,
    2250, 2520, 2840, 3190, 3580, 4020,
)

_WINDOW = 0.54 + 0.46 * np.cos(2 * math.pi * (np.arange(N) - N / 2) / N)


def make_frames_hamming(samples):
    """Split PCM samples into overlapping Hamming-windowed magnitude spectra.

    Returns an array of shape ``(frames, N)``; each row is normalised so that
    its mean magnitude is one. The first frame starts one hop into the signal.
    """
    data = np.asarray(samples, dtype=np.float64).ravel()
    count = len(data) // _HOP - 1
    if count <= 0:
        return np.zeros((0, N))
    needed = count * _HOP + N
    padded = np.zeros(max(needed, len(data)))
    padded[: len(data)] = data
    starts = _HOP * np.arange(1, count + 1)
    windowed = padded[starts[:, None] + np.arange(N)] * _WINDOW
    magnitudes = np.array([np.abs(fft(row)) for row in windowed])
    with np.errstate(divide="ignore", invalid="ignore"):
        return magnitudes / magnitudes.mean(axis=1, keepdims=True)


def mel_filter_bank():
    """Return the filter coefficients as an array of shape ``(N_FILTER, N)``."""
    centres = MEL_FILTERS
    freqs = np.arange(N) * _SAMPLE_RATE / N
    bank = np.zeros((N_FILTER, N))
    for index, centre in enumerate(centres):
        low = centres[index - 1] if index > 0 else centres[0] - (centres[1] - centres[0])
        high = (
            centres[index + 1]
            if index < N_FILTER - 1
            else centres[-1] + (centres[-1] - centres[-2])
        )
        inside = (freqs > low) & (freqs < high)
        rising = inside & (freqs < centre)
        falling = inside & (freqs >= centre)
        bank[index, rising] = (freqs[rising] - low) / (centre - low)
        bank[index, falling] = 1 - (freqs[falling] - centre) / (high - centre)
    return bank


def _dct_matrix():
    k = np.arange(N_FILTER)
    j = np.arange(N_MFCC)[:, None]
    matrix = np.cos(math.pi * (2 * k + 1) * j / (2 * N_FILTER))
    scale = np.full((N_MFCC, 1), math.sqrt(2.0 / N_FILTER))
    scale[0, 0] = math.sqrt(1.0 / N_FILTER)
    return matrix * scale


def mfcc_features(frames):
    """Compute MFCC features for magnitude frames of shape ``(n, N)``."""
    data = np.asarray(frames, dtype=np.float64)
    if data.size == 0:
        return np.zeros((0, N_MFCC))
    data = data.reshape(-1, N)
    outputs = data @ mel_filter_bank().T
    return np.log(np.abs(outputs) + 1e-10) @ _dct_matrix().T