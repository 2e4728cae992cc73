"""Audio capture and playback through the ALSA command-line tools, and voice detection."""

import math
import subprocess
import threading
from dataclasses import dataclass

import numpy as np

from .wave import BITS_PER_SAMPLE, CHANNELS, SAMPLE_RATE

FRAMES_IN_BLOCK = 48 * 30
"""Samples per capture block: 30 ms at 48 kHz."""

BLOCKSIZE = FRAMES_IN_BLOCK * (BITS_PER_SAMPLE // 8)
"""Bytes per capture block."""

VAD_VOICE_LIMIT = 40
VAD_VOICE_MAX = 6
VAD_VOICE_MIN = 10

DEFAULT_DEVICE = "default"

_FORMAT_ARGS = (
    "-t", "raw",
    "-f", "S16_LE",
    "-r", str(SAMPLE_RATE),
    "-c", str(CHANNELS),
)


class AudioError(RuntimeError):
    """Raised when a device cannot be opened or audio cannot be transferred."""


@dataclass(frozen=True)
class Device:
    """A PCM device: its name, description and direction (Input, Output or Both)."""

    name: str
    description: str
    io: str


class VoiceDetector:
    """Frame-wise voice activity detector.

    Modes 0 to 3 are increasingly restrictive in reporting speech. Frames
    must hold 10, 20 or 30 ms of audio at the configured sample rate.
    """

    MODES = (0, 1, 2, 3)
    SAMPLE_RATES = (8000, 16000, 32000, 48000)
    _RATIOS = (2.0, 2.5, 3.2, 4.0)
    _MIN_RMS = (60.0, 90.0, 130.0, 180.0)
    _ADAPT = 0.05

    def __init__(self, mode=0, sample_rate=8000):
        if mode not in self.MODES:
            raise ValueError(f"invalid mode: {mode}")
        if sample_rate not in self.SAMPLE_RATES:
            raise ValueError(f"invalid sample rate: {sample_rate} Hz")
        self.mode = mode
        self.sample_rate = sample_rate
        self.frame_lengths = tuple(sample_rate * ms // 1000 for ms in (10, 20, 30))
        self.reset()

    def reset(self):
        """Forget the noise estimate gathered so far."""
        self._noise = self._MIN_RMS[self.mode]

    def process(self, frame):
        """Return True if the frame holds voice, False otherwise."""
        data = np.asarray(frame, dtype=np.float64).ravel()
        if len(data) not in self.frame_lengths:
            raise ValueError(
                f"invalid frame length {len(data)}; expected one of {self.frame_lengths}"
            )
        rms = math.sqrt(float(np.mean(data * data)))
        floor = self._MIN_RMS[self.mode]
        voiced = rms >= floor and rms > self._noise * self._RATIOS[self.mode]
        if not voiced:
            self._noise = max(floor, (1 - self._ADAPT) * self._noise + self._ADAPT * rms)
        return voiced


def _device_name(device):
    return device or DEFAULT_DEVICE


def _command(tool, device):
    return [tool, "-q", "-D", _device_name(device), *_FORMAT_ARGS]


def _spawn(command, device):
    try:
        return subprocess.Popen(
            command, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL
        )
    except OSError as error:
        raise AudioError(f"cannot open device {_device_name(device)}") from error


def _finish(process):
    process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()
    if process.stdout is not None:
        process.stdout.close()


def _iter_blocks(stream):
    while True:
        data = stream.read(BLOCKSIZE)
        if not data or len(data) < BLOCKSIZE:
            return
        yield np.frombuffer(data, dtype="<i2").astype(np.int16)


def _join(blocks):
    if not blocks:
        return np.zeros(0, dtype=np.int16)
    return np.concatenate(blocks).astype(np.int16)


class Recorder:
    """Records whole blocks from a capture device between start and stop."""

    def __init__(self, device=None):
        self.device = device
        self.samples = None
        self._process = None
        self._thread = None
        self._blocks = []

    def start(self):
        """Open the device and begin reading blocks in the background."""
        if self._process is not None:
            raise AudioError("recording is already running")
        self._blocks = []
        self._process = _spawn(_command("arecord", self.device), self.device)
        self._thread = threading.Thread(
            target=self._capture, args=(self._process.stdout,), daemon=True
        )
        self._thread.start()

    def _capture(self, stream):
        for block in _iter_blocks(stream):
            self._blocks.append(block)

    def stop(self):
        """Close the device and return everything recorded as int16 samples."""
        if self._process is None:
            raise AudioError("recording was not started")
        self._process.terminate()
        self._thread.join()
        _finish(self._process)
        self._process = None
        self._thread = None
        self.samples = _join(self._blocks)
        return self.samples

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        if self._process is not None:
            self.stop()


def parse_device_list(text):
    """Parse a device listing into ``(name, description)`` pairs.

    Names start at the left margin; indented lines below a name make up its
    description, joined with newlines.
    """
    entries = []
    for line in text.splitlines():
        if not line.strip():
            continue
        if line[0].isspace():
            if entries:
                name, description = entries[-1]
                part = line.strip()
                entries[-1] = (name, f"{description}\n{part}" if description else part)
        else:
            entries.append((line.strip(), ""))
    return entries


def _listing(tool):
    try:
        result = subprocess.run(
            [tool, "-L"], capture_output=True, text=True, check=False
        )
    except OSError as error:
        raise AudioError(f"cannot list devices with {tool}") from error
    return result.stdout or ""


def list_devices():
    """Return the PCM devices, marking each as Input, Output or Both."""
    playback = parse_device_list(_listing("aplay"))
    capture = parse_device_list(_listing("arecord"))
    playback_names = {name for name, _ in playback}
    capture_names = {name for name, _ in capture}
    devices = [
        Device(name, description, "Both" if name in capture_names else "Output")
        for name, description in playback
    ]
    devices.extend(
        Device(name, description, "Input")
        for name, description in capture
        if name not in playback_names
    )
    return devices


def play(samples, device=None):
    """Play int16 samples on ``device`` (the default device if None)."""
    pcm = np.asarray(samples, dtype="<i2").ravel().tobytes()
    try:
        result = subprocess.run(
            _command("aplay", device),
            input=pcm,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            check=False,
        )
    except OSError as error:
        raise AudioError(f"cannot open device {_device_name(device)}") from error
    if result.returncode != 0:
        detail = (result.stderr or b"").decode(errors="replace").strip()
        raise AudioError(f"playback on {_device_name(device)} failed: {detail}")


def read_blocks(device=None):
    """Yield blocks of FRAMES_IN_BLOCK int16 samples captured from ``device``."""
    process = _spawn(_command("arecord", device), device)
    try:
        yield from _iter_blocks(process.stdout)
    finally:
        _finish(process)


def vad_collect(
    blocks,
    detector,
    voice_max=VAD_VOICE_MAX,
    voice_min=VAD_VOICE_MIN,
    limit=VAD_VOICE_LIMIT,
):
    """Collect one utterance from an iterable of blocks.

    Blocks are judged in rounds of ``limit``. Recording begins once more than
    ``voice_max`` blocks in a round are voiced, keeping the block before the
    trigger, and ends after a round with fewer than ``voice_min`` voiced
    blocks, or when the blocks run out.
    """
    if limit <= 0:
        raise ValueError("limit must be positive")
    iterator = iter(blocks)
    collected = []
    previous = np.zeros(FRAMES_IN_BLOCK, dtype=np.int16)
    recording = False
    while True:
        voiced = 0
        for _ in range(limit):
            block = next(iterator, None)
            if block is None:
                return _join(collected)
            block = np.array(block, dtype=np.int16).ravel()
            if detector.process(block):
                voiced += 1
            if not recording and voiced > voice_max:
                recording = True
                collected.append(previous)
            if recording:
                collected.append(block)
            previous = block
        if recording and voiced < voice_min:
            return _join(collected)


def vad_record(detector=None, device=None):
    """Record one utterance from ``device`` using voice activity detection."""
    if detector is None:
        detector = VoiceDetector(sample_rate=SAMPLE_RATE)
    blocks = read_blocks(device)
    try:
        return vad_collect(blocks, detector)
    finally:
        blocks.close()