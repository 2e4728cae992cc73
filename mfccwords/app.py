"""Interactive word learning and recognition."""

import argparse
import enum
import sys
import threading
import time
from pathlib import Path

from .audio import AudioError, play, vad_record
from .compare import compare
from .frame import make_frames_hamming, mfcc_features
from .split import split
from .wave import read_wave, write_wave
from .words import WordStore

MATCH_THRESHOLD = 3.5
"""Distances below this count as a recognised word."""

_POLL_SECONDS = 0.03
_PROMPT = "(n)ew words, (l)ist words, (d)ictate words, (e)xit: "


class MfccState(enum.Enum):
    IDLE = 0
    READY = 1
    WORK = 2
    FINISH = 3
    RECO = 4
    SAVE = 5
    DESTROY = 6


_POLLING_STATES = frozenset(
    {MfccState.IDLE, MfccState.READY, MfccState.WORK, MfccState.FINISH}
)


class MfccController:
    """State holder with a background worker that polls the state."""

    def __init__(self):
        self._state = MfccState.IDLE
        self._event = MfccState.IDLE
        self._thread = None

    def set(self, state):
        self._state = MfccState(state)

    def get(self):
        return self._state

    def event(self):
        return self._event

    def result(self):
        """Acknowledge a finished job; there is no result payload."""
        if self._state is MfccState.FINISH:
            self._event = MfccState.IDLE
        return None

    def _run(self):
        while self._state in _POLLING_STATES:
            time.sleep(_POLL_SECONDS)

    def start(self):
        """Reset to idle and start the worker."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("controller is already running")
        self._state = MfccState.IDLE
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self):
        """Move to the destroy state and wait for the worker to end."""
        self._state = MfccState.DESTROY
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()


def features_for(samples):
    """Return the MFCC features of a PCM signal."""
    return mfcc_features(make_frames_hamming(samples))


def best_match(features, words):
    """Return ``(name, distance)`` of the closest word, or None if none compares."""
    best = None
    for word in words:
        distance = compare(features, word.features)
        if best is None or distance < best[1]:
            best = (word.name, distance)
    return best


def learn_words(samples, store, ask, wave_dir):
    """Store every word found in ``samples`` under the name ``ask`` returns.

    ``ask`` is called with each word's samples; answering ``x`` or nothing
    skips the word. Each stored word is also written to ``wave_dir`` as
    ``<name>.wav``. Returns the names stored, in order.
    """
    wave_dir = Path(wave_dir)
    saved = []
    for signal in split(samples):
        features = features_for(signal)
        name = ask(signal)
        if not name or name == "x":
            continue
        store.save(name, features)
        wave_dir.mkdir(parents=True, exist_ok=True)
        write_wave(wave_dir / f"{name}.wav", signal)
        saved.append(name)
    return saved


def recognize_words(samples, store):
    """Return ``(name, distance)`` for each word in ``samples`` that matches."""
    words = store.load()
    matches = []
    for signal in split(samples):
        match = best_match(features_for(signal), words)
        if match is not None and match[1] < MATCH_THRESHOLD:
            matches.append(match)
    return matches


def _record(device):
    print("Please speak now", flush=True)
    return vad_record(device=device)


def _learn(args, store, wave_dir):
    samples = _record(args.device)

    def ask(_signal):
        return input("Enter identifier (x to skip): ").strip()

    for name in learn_words(samples, store, ask, wave_dir):
        try:
            play(read_wave(wave_dir / f"{name}.wav"), args.device)
        except AudioError as error:
            print(error, file=sys.stderr)


def _dictate(args, store):
    samples = _record(args.device)
    for name, distance in recognize_words(samples, store):
        print(f"maybe is {name} {distance:f}", flush=True)
    print(flush=True)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="mfccwords", description="Learn and recognise spoken words."
    )
    parser.add_argument("--words", default="words", help="directory of learned words")
    parser.add_argument("--waves", default="waves", help="directory for recordings")
    parser.add_argument("--device", default=None, help="audio device name")
    args = parser.parse_args(argv)

    store = WordStore(args.words)
    wave_dir = Path(args.waves)
    controller = MfccController()
    controller.start()
    try:
        while True:
            try:
                answer = input(_PROMPT).strip()
            except EOFError:
                break
            choice = answer[:1]
            if choice == "e":
                break
            try:
                if choice == "n":
                    _learn(args, store, wave_dir)
                elif choice == "l":
                    for name in store.names():
                        print(name)
                elif choice == "d":
                    _dictate(args, store)
            except (AudioError, ValueError) as error:
                print(error, file=sys.stderr)
    finally:
        controller.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())