"""Version numbers, access flags and parameter constraints of the sound plugin interfaces."""

import enum
from dataclasses import dataclass

LIB_VERSION_STR = "1.1.4.1"
"""Library version as a string, including the extra version number."""

LIB_EXTRAVER = 1000000
"""Extra version number, used mainly for betas."""

CTL_EXT_KEY_NOT_FOUND = (1 << 64) - 1
"""Key returned by an element lookup when no matching element exists."""


@dataclass(frozen=True, order=True)
class ProtocolVersion:
    """A major.minor.tiny version packed as ``major << 16 | minor << 8 | tiny``."""

    major: int
    minor: int = 0
    tiny: int = 0

    def __post_init__(self):
        if self.major < 0:
            raise ValueError(f"invalid major version: {self.major}")
        for field in ("minor", "tiny"):
            value = getattr(self, field)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"invalid {field} version: {value}")

    def encode(self):
        """Return the packed integer form."""
        return (self.major << 16) | (self.minor << 8) | self.tiny

    @classmethod
    def decode(cls, value):
        """Build a version from its packed integer form."""
        if value < 0:
            raise ValueError(f"invalid packed version: {value}")
        return cls(value >> 16, (value >> 8) & 0xFF, value & 0xFF)

    def __str__(self):
        return f"{self.major}.{self.minor}.{self.tiny}"


CTL_EXT_VERSION = ProtocolVersion(1, 0, 1)
"""Protocol version of external control plugins."""

EXTPLUG_VERSION = ProtocolVersion(1, 0, 2)
"""Protocol version of external filter plugins."""

_LIB_VERSION = ProtocolVersion(1, 1, 4)


def library_version():
    """Return the library version (major, minor, subminor)."""
    return _LIB_VERSION


class CtlExtAccess(enum.IntFlag):
    """Access bits an external control element reports for itself."""

    READ = 1 << 0
    WRITE = 1 << 1
    READWRITE = 3 << 0
    VOLATILE = 1 << 2
    TLV_READ = 1 << 4
    TLV_WRITE = 1 << 5
    TLV_READWRITE = 3 << 4
    TLV_COMMAND = 1 << 6
    INACTIVE = 1 << 8
    TLV_CALLBACK = 1 << 28


class ExtplugHwParam(enum.IntEnum):
    """Hardware parameters a filter plugin may constrain."""

    FORMAT = 0
    CHANNELS = 1


EXTPLUG_HW_PARAMS = len(ExtplugHwParam)
"""Number of constrainable hardware parameters."""


_CARD_FIELD_SIZES = (
    ("id", 16),
    ("driver", 16),
    ("name", 32),
    ("longname", 80),
    ("mixername", 80),
)


@dataclass
class CardInfo:
    """Identity of a card served by an external control plugin.

    Each text field must fit its fixed-size slot including the terminating NUL.
    """

    card_idx: int = 0
    id: str = ""
    driver: str = ""
    name: str = ""
    longname: str = ""
    mixername: str = ""

    def __post_init__(self):
        for field, size in _CARD_FIELD_SIZES:
            value = getattr(self, field)
            if len(value.encode()) >= size:
                raise ValueError(
                    f"CardInfo.{field} must be shorter than {size} bytes, got {value!r}"
                )


def _kind(kind):
    try:
        return ExtplugHwParam(kind)
    except ValueError as error:
        raise ValueError(f"invalid hw parameter: {kind!r}") from error


def _unsigned(value):
    if value < 0:
        raise ValueError(f"parameter values must not be negative, got {value}")
    return value


class ExtplugConstraints:
    """Parameter constraints of a filter plugin and of its slave PCM.

    A constraint is either a set of allowed values or an inclusive range;
    a parameter without a constraint allows every value.
    """

    def __init__(self):
        self.params = {}
        self.slave_params = {}

    def reset(self):
        """Clear every constraint on both sides."""
        self.params.clear()
        self.slave_params.clear()

    @staticmethod
    def _list(target, kind, values):
        allowed = frozenset(_unsigned(value) for value in values)
        if not allowed:
            raise ValueError("a parameter list must not be empty")
        target[_kind(kind)] = allowed

    @staticmethod
    def _minmax(target, kind, low, high):
        _unsigned(low)
        _unsigned(high)
        if low > high:
            raise ValueError(f"minimum {low} is larger than maximum {high}")
        target[_kind(kind)] = range(low, high + 1)

    @staticmethod
    def _allows(target, kind, value):
        constraint = target.get(_kind(kind))
        return constraint is None or value in constraint

    def set_param_list(self, kind, values):
        self._list(self.params, kind, values)

    def set_param_minmax(self, kind, low, high):
        self._minmax(self.params, kind, low, high)

    def set_param(self, kind, value):
        self.set_param_list(kind, [value])

    def set_slave_param_list(self, kind, values):
        self._list(self.slave_params, kind, values)

    def set_slave_param_minmax(self, kind, low, high):
        self._minmax(self.slave_params, kind, low, high)

    def set_slave_param(self, kind, value):
        self.set_slave_param_list(kind, [value])

    def allows(self, kind, value):
        """Return True if the plugin side accepts ``value`` for ``kind``."""
        return self._allows(self.params, kind, value)

    def slave_allows(self, kind, value):
        """Return True if the slave side accepts ``value`` for ``kind``."""
        return self._allows(self.slave_params, kind, value)