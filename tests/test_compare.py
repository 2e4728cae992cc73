import math

import numpy as np
import pytest

from mfccwords.compare import compare
from mfccwords.frame import N_MFCC


def _features(count, seed):
    return np.random.default_rng(seed).normal(size=(count, N_MFCC))


def test_identical_sequences_have_zero_distance():
    a = _features(12, 0)
    assert compare(a, a) == 0.0


def test_symmetry():
    a = _features(7, 1)
    b = _features(11, 2)
    assert compare(a, b) == pytest.approx(compare(b, a))


def test_single_frames():
    a = np.zeros((1, N_MFCC))
    b = np.zeros((1, N_MFCC))
    b[0, 0] = 3.0
    b[0, 1] = 4.0
    assert compare(a, b) == pytest.approx(5.0 / math.sqrt(2))


def test_time_stretch_is_absorbed():
    a = _features(6, 3)
    stretched = np.repeat(a, 2, axis=0)
    assert compare(a, stretched) == pytest.approx(0.0)


def test_distance_is_non_negative():
    assert compare(_features(5, 4), _features(9, 5)) > 0


def test_empty_against_nonempty_is_infinite():
    assert compare(np.zeros((0, N_MFCC)), _features(3, 6)) == math.inf


def test_width_mismatch_raises():
    with pytest.raises(ValueError):
        compare(np.zeros((2, N_MFCC)), np.zeros((2, N_MFCC - 1)))