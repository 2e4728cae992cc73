"""Structures and ioctl numbers of the direct FM (OPL2/OPL3) synthesizer interface."""

import enum
import struct
from dataclasses import dataclass

FM_KEY_SBI = b"SBI\x1a"
FM_KEY_2OP = b"2OP\x1a"
FM_KEY_4OP = b"4OP\x1a"

OSS_IOCTL_RESET = 0x20
OSS_IOCTL_PLAY_NOTE = 0x21
OSS_IOCTL_SET_VOICE = 0x22
OSS_IOCTL_SET_PARAMS = 0x23
OSS_IOCTL_SET_MODE = 0x24
OSS_IOCTL_SET_OPL = 0x25

IOC_NONE = 0
IOC_WRITE = 1
IOC_READ = 2

_INT_SIZE = 4


class FmMode(enum.IntEnum):
    OPL2 = 0x00
    OPL3 = 0x01


def _pack(layout, values, what):
    try:
        return layout.pack(*values)
    except struct.error as error:
        raise ValueError(f"cannot pack {what}: {error}") from error


def _unpack(layout, data, what):
    data = bytes(data)
    if len(data) != layout.size:
        raise ValueError(f"{what} needs {layout.size} bytes, got {len(data)}")
    return layout.unpack(data)


def _mode(value):
    try:
        return FmMode(value)
    except ValueError:
        return value


@dataclass
class FmInfo:
    fm_mode: int = FmMode.OPL2
    rhythm: int = 0

    _LAYOUT = struct.Struct("<BB")

    def pack(self):
        return _pack(self._LAYOUT, (int(self.fm_mode), self.rhythm), "FmInfo")

    @classmethod
    def unpack(cls, data):
        mode, rhythm = _unpack(cls._LAYOUT, data, "FmInfo")
        return cls(_mode(mode), rhythm)


@dataclass
class FmVoice:
    """One operator cell of an FM voice."""

    op: int = 0
    voice: int = 0
    am: int = 0
    vibrato: int = 0
    do_sustain: int = 0
    kbd_scale: int = 0
    harmonic: int = 0
    scale_level: int = 0
    volume: int = 0
    attack: int = 0
    decay: int = 0
    sustain: int = 0
    release: int = 0
    feedback: int = 0
    connection: int = 0
    left: int = 0
    right: int = 0
    waveform: int = 0

    _LAYOUT = struct.Struct("<18B")

    def _values(self):
        return (
            self.op, self.voice, self.am, self.vibrato, self.do_sustain,
            self.kbd_scale, self.harmonic, self.scale_level, self.volume,
            self.attack, self.decay, self.sustain, self.release,
            self.feedback, self.connection, self.left, self.right, self.waveform,
        )

    def pack(self):
        return _pack(self._LAYOUT, self._values(), "FmVoice")

    @classmethod
    def unpack(cls, data):
        return cls(*_unpack(cls._LAYOUT, data, "FmVoice"))


@dataclass
class FmNote:
    """A note: voice, octave, 10-bit frequency number and key on/off."""

    voice: int = 0
    octave: int = 0
    fnum: int = 0
    key_on: int = 0

    # Laid out as the C structure with natural alignment of the int field.
    _LAYOUT = struct.Struct("<BB2xIB3x")

    def pack(self):
        values = (self.voice, self.octave, self.fnum, self.key_on)
        return _pack(self._LAYOUT, values, "FmNote")

    @classmethod
    def unpack(cls, data):
        return cls(*_unpack(cls._LAYOUT, data, "FmNote"))


@dataclass
class FmParams:
    """Parameters shared by all voices, including the percussion set."""

    am_depth: int = 0
    vib_depth: int = 0
    kbd_split: int = 0
    rhythm: int = 0
    bass: int = 0
    snare: int = 0
    tomtom: int = 0
    cymbal: int = 0
    hihat: int = 0

    _LAYOUT = struct.Struct("<9B")

    def pack(self):
        values = (
            self.am_depth, self.vib_depth, self.kbd_split, self.rhythm,
            self.bass, self.snare, self.tomtom, self.cymbal, self.hihat,
        )
        return _pack(self._LAYOUT, values, "FmParams")

    @classmethod
    def unpack(cls, data):
        return cls(*_unpack(cls._LAYOUT, data, "FmParams"))


@dataclass
class SbiPatch:
    """A fixed-size patch record; name and extension are NUL padded."""

    prog: int = 0
    bank: int = 0
    key: bytes = FM_KEY_SBI
    name: bytes = b""
    extension: bytes = b""
    data: bytes = bytes(32)

    _LAYOUT = struct.Struct("<BB4s25s7s32s")
    _SIZES = (("key", 4), ("name", 25), ("extension", 7), ("data", 32))

    def pack(self):
        for field, size in self._SIZES:
            if len(getattr(self, field)) > size:
                raise ValueError(f"SbiPatch.{field} is longer than {size} bytes")
        values = (self.prog, self.bank, self.key, self.name, self.extension, self.data)
        return _pack(self._LAYOUT, values, "SbiPatch")

    @classmethod
    def unpack(cls, data):
        prog, bank, key, name, extension, payload = _unpack(cls._LAYOUT, data, "SbiPatch")
        return cls(prog, bank, key, name.rstrip(b"\0"), extension.rstrip(b"\0"), payload)


def ioctl_number(direction, kind, number, size):
    """Encode an ioctl request number the way the kernel's _IOC macro does."""
    if isinstance(kind, str):
        if len(kind) != 1:
            raise ValueError("kind must be a single character")
        kind = ord(kind)
    if not 0 <= direction <= 3:
        raise ValueError(f"invalid direction: {direction}")
    if not 0 <= kind <= 0xFF:
        raise ValueError(f"invalid kind: {kind}")
    if not 0 <= number <= 0xFF:
        raise ValueError(f"invalid number: {number}")
    if not 0 <= size < 1 << 14:
        raise ValueError(f"invalid size: {size}")
    return (direction << 30) | (size << 16) | (kind << 8) | number


def fm_ioctls():
    """Return the FM ioctl request numbers by name."""
    return {
        "INFO": ioctl_number(IOC_READ, "H", 0x20, FmInfo._LAYOUT.size),
        "RESET": ioctl_number(IOC_NONE, "H", 0x21, 0),
        "PLAY_NOTE": ioctl_number(IOC_WRITE, "H", 0x22, FmNote._LAYOUT.size),
        "SET_VOICE": ioctl_number(IOC_WRITE, "H", 0x23, FmVoice._LAYOUT.size),
        "SET_PARAMS": ioctl_number(IOC_WRITE, "H", 0x24, FmParams._LAYOUT.size),
        "SET_MODE": ioctl_number(IOC_WRITE, "H", 0x25, _INT_SIZE),
        "SET_CONNECTION": ioctl_number(IOC_WRITE, "H", 0x26, _INT_SIZE),
        "CLEAR_PATCHES": ioctl_number(IOC_NONE, "H", 0x40, 0),
    }