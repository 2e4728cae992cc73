import numpy as np
import pytest

from mfccwords.app import (
    MfccController,
    MfccState,
    best_match,
    features_for,
    learn_words,
    main,
    recognize_words,
)
from mfccwords.frame import N_MFCC
from mfccwords.split import split
from mfccwords.wave import read_wave
from mfccwords.words import Word, WordStore


def _utterance(seed=0):
    rng = np.random.default_rng(seed)
    quiet = rng.integers(-10, 11, 30 * 512)
    loud = rng.integers(-3000, 3001, 40 * 512)
    tail = rng.integers(-10, 11, 50 * 512)
    return np.concatenate([quiet, loud, tail]).astype(np.int16)


def test_features_for_shape():
    signal = split(_utterance())[0]
    features = features_for(signal)
    assert features.shape[1] == N_MFCC
    assert len(features) > 0
    assert np.isfinite(features).all()


def test_best_match_picks_closest():
    words = [Word("a", np.zeros((3, N_MFCC))), Word("b", np.ones((3, N_MFCC)))]
    name, distance = best_match(np.ones((3, N_MFCC)), words)
    assert name == "b"
    assert distance == pytest.approx(0.0)


def test_best_match_without_words():
    assert best_match(np.ones((2, N_MFCC)), []) is None


def test_learn_then_recognize(tmp_path):
    store = WordStore(tmp_path / "words")
    samples = _utterance()
    saved = learn_words(samples, store, lambda signal: "hello", tmp_path / "waves")
    assert saved == ["hello"]
    assert store.names() == ["hello"]
    np.testing.assert_array_equal(
        read_wave(tmp_path / "waves" / "hello.wav"), split(samples)[0]
    )
    matches = recognize_words(samples, store)
    assert [name for name, _ in matches] == ["hello"]
    assert matches[0][1] < 0.01


def test_learn_skip(tmp_path):
    store = WordStore(tmp_path / "words")
    saved = learn_words(_utterance(), store, lambda signal: "x", tmp_path / "waves")
    assert saved == []
    assert store.names() == []


def test_recognize_without_words(tmp_path):
    assert recognize_words(_utterance(), WordStore(tmp_path / "none")) == []


def test_controller_states():
    controller = MfccController()
    assert controller.get() is MfccState.IDLE
    controller.start()
    assert controller.running
    controller.set(MfccState.READY)
    assert controller.get() is MfccState.READY
    controller.stop()
    assert controller.get() is MfccState.DESTROY
    assert not controller.running


def test_controller_result_acknowledges_finish():
    controller = MfccController()
    controller.set(MfccState.FINISH)
    assert controller.result() is None
    assert controller.event() is MfccState.IDLE


def test_controller_double_start_rejected():
    controller = MfccController()
    controller.start()
    try:
        with pytest.raises(RuntimeError):
            controller.start()
    finally:
        controller.stop()


def test_main_lists_words(tmp_path, monkeypatch, capsys):
    store = WordStore(tmp_path / "words")
    store.save("hello", np.zeros((1, N_MFCC)))
    answers = iter(["l", "e"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    result = main(["--words", str(tmp_path / "words"), "--waves", str(tmp_path / "waves")])
    assert result == 0
    assert "hello" in capsys.readouterr().out.splitlines()


def test_main_stops_at_end_of_input(tmp_path, monkeypatch):
    def no_input(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", no_input)
    assert main(["--words", str(tmp_path / "w"), "--waves", str(tmp_path / "v")]) == 0