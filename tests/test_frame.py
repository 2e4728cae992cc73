import math

import numpy as np
import pytest

from mfccwords.frame import (
    N,
    N_FILTER,
    N_MFCC,
    make_frames_hamming,
    mel_filter_bank,
    mfcc_features,
)


def _noise(length, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(-1000, 1000, size=length).astype(np.int16)


def test_short_signal_gives_no_frames():
    assert make_frames_hamming(_noise(800)).shape == (0, N)


def test_frame_count():
    assert make_frames_hamming(_noise(2240)).shape == (4, N)


def test_frames_are_mean_normalised():
    frames = make_frames_hamming(_noise(5000))
    assert np.allclose(frames.mean(axis=1), 1.0)
    assert np.all(frames >= 0)


def test_sine_peak_in_expected_bin():
    t = np.arange(4000)
    bin_index = 10
    samples = (8000 * np.sin(2 * np.pi * bin_index * t / N)).astype(np.int16)
    frames = make_frames_hamming(samples)
    assert len(frames) > 0
    for row in frames:
        assert int(np.argmax(row[: N // 2])) == bin_index


def test_filter_bank_shape_and_range():
    bank = mel_filter_bank()
    assert bank.shape == (N_FILTER, N)
    assert np.all(bank >= 0)
    assert np.all(bank <= 1)
    assert np.all(bank.sum(axis=1) > 0)


def test_filter_bank_zero_outside_band():
    bank = mel_filter_bank()
    used_bins = np.flatnonzero(bank.any(axis=0))
    # Filters span 100 Hz to 4460 Hz; bins are 93.75 Hz apart at 48 kHz.
    assert int(used_bins.min()) == 2
    assert int(used_bins.max()) == 47


def test_mfcc_shape():
    frames = make_frames_hamming(_noise(5000))
    features = mfcc_features(frames)
    assert features.shape == (len(frames), N_MFCC)
    assert np.all(np.isfinite(features))


def test_mfcc_empty():
    assert mfcc_features(np.zeros((0, N))).shape == (0, N_MFCC)


def test_scaling_only_moves_first_coefficient():
    ones = np.ones((2, N))
    base = mfcc_features(ones)
    scaled = mfcc_features(ones * math.e)
    assert scaled[:, 0] - base[:, 0] == pytest.approx([math.sqrt(N_FILTER)] * 2, rel=1e-6)
    assert np.allclose(scaled[:, 1:], base[:, 1:], atol=1e-6)