import numpy as np

from mfccwords.frame import N
from mfccwords.split import split


def _quiet(blocks):
    return np.zeros(blocks * N, dtype=np.int16)


def _loud(blocks):
    t = np.arange(blocks * N)
    return (10000 * np.sin(2 * np.pi * t / 37)).astype(np.int16)


def test_short_input_gives_nothing():
    assert split(np.zeros(N - 1, dtype=np.int16)) == []


def test_silence_gives_nothing():
    assert split(_quiet(50)) == []


def test_single_burst():
    samples = np.concatenate([_quiet(10), _loud(30), _quiet(60)])
    signals = split(samples)
    assert len(signals) == 1
    signal = signals[0]
    assert signal.dtype == np.int16
    assert len(signal) % N == 0
    assert np.array_equal(signal, samples[10 * N : 10 * N + len(signal)])
    assert len(signal) == 71 * N


def test_two_bursts():
    samples = np.concatenate(
        [_quiet(10), _loud(30), _quiet(60), _loud(30), _quiet(60)]
    )
    signals = split(samples)
    assert len(signals) == 2
    assert np.array_equal(signals[0][:N], samples[10 * N : 11 * N])
    assert np.array_equal(signals[1][:N], samples[100 * N : 101 * N])


def test_short_stream_ending_emits_burst():
    samples = np.concatenate([_quiet(5), _loud(10), _quiet(1)])
    signals = split(samples)
    assert len(signals) == 1
    assert np.array_equal(signals[0], samples[5 * N : 15 * N])