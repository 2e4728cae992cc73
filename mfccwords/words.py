"""Storage of learned words as MFCC feature files in a directory."""

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .frame import N_MFCC


@dataclass
class Word:
    """A learned word: its name and its MFCC features, shape ``(n, N_MFCC)``."""

    name: str
    features: np.ndarray

    @property
    def n(self):
        """Number of feature frames."""
        return len(self.features)


def _as_features(features):
    data = np.asarray(features, dtype=np.float64)
    if data.size == 0:
        return data.reshape(0, N_MFCC)
    if data.ndim != 2 or data.shape[1] != N_MFCC:
        raise ValueError(f"features must have shape (n, {N_MFCC})")
    return data


class WordStore:
    """A directory holding one text file of features per word.

    Each file starts with the number of frames on its own line, followed by
    every feature written with six decimals and a trailing space.
    """

    def __init__(self, directory="words"):
        self.directory = Path(directory)

    def _path(self, name):
        if not name or name.startswith(".") or "/" in name or "\\" in name:
            raise ValueError(f"invalid word name: {name!r}")
        return self.directory / name

    def save(self, name, features):
        """Write the features of ``name``, replacing an earlier entry."""
        path = self._path(name)
        data = _as_features(features)
        self.directory.mkdir(parents=True, exist_ok=True)
        text = f"{len(data)}\n" + "".join(f"{value:f} " for value in data.ravel())
        path.write_text(text)
        return path

    def _entries(self):
        if not self.directory.is_dir():
            return []
        return sorted(
            entry
            for entry in self.directory.iterdir()
            if not entry.name.startswith(".") and entry.is_file()
        )

    @staticmethod
    def _read(path):
        tokens = path.read_text().split()
        if not tokens:
            raise ValueError(f"{path}: empty word file")
        try:
            count = int(tokens[0])
        except ValueError as error:
            raise ValueError(f"{path}: bad frame count {tokens[0]!r}") from error
        if count < 0:
            raise ValueError(f"{path}: negative frame count")
        needed = count * N_MFCC
        values = tokens[1 : 1 + needed]
        if len(values) < needed:
            raise ValueError(f"{path}: expected {needed} features, found {len(values)}")
        try:
            numbers = [float(value) for value in values]
        except ValueError as error:
            raise ValueError(f"{path}: malformed feature value") from error
        features = np.array(numbers, dtype=np.float64).reshape(count, N_MFCC)
        return Word(path.name, features)

    def load(self):
        """Return every stored word, ordered by name."""
        return [self._read(path) for path in self._entries()]

    def names(self):
        """Return the names of the stored words in sorted order."""
        return [path.name for path in self._entries()]