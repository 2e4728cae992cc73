"""Dynamic-time-warping distance between MFCC feature sequences."""

import math

import numpy as np

from .frame import N_MFCC


def _as_matrix(features):
    data = np.asarray(features, dtype=np.float64)
    if data.size == 0:
        return data.reshape(0, data.shape[-1] if data.ndim == 2 else N_MFCC)
    if data.ndim != 2:
        raise ValueError("features must be a two-dimensional array")
    return data


def compare(features1, features2):
    """Return the normalised DTW distance; smaller means more similar."""
    first = _as_matrix(features1)
    second = _as_matrix(features2)
    if first.shape[1] != second.shape[1]:
        raise ValueError("feature vectors differ in length")
    n1, n2 = len(first), len(second)
    local = np.sqrt(((first[:, None, :] - second[None, :, :]) ** 2).sum(axis=2))

    previous = [0.0] + [math.inf] * n2
    for local_row in local.tolist():
        current = [math.inf]
        for j, cost in enumerate(local_row, start=1):
            current.append(cost + min(previous[j], previous[j - 1], current[j - 1]))
        previous = current

    norm = math.hypot(n1, n2)
    if norm == 0:
        return math.nan
    return previous[n2] / norm