import pytest

from mfccwords.fm import (
    FM_KEY_2OP,
    FM_KEY_SBI,
    IOC_NONE,
    IOC_READ,
    FmInfo,
    FmMode,
    FmNote,
    FmParams,
    FmVoice,
    SbiPatch,
    fm_ioctls,
    ioctl_number,
)


def test_info_pack_bytes():
    assert FmInfo(FmMode.OPL3, 1).pack() == bytes([FmMode.OPL3, 1])


def test_info_round_trip_restores_mode():
    info = FmInfo.unpack(FmInfo(FmMode.OPL3, 0).pack())
    assert info.fm_mode is FmMode.OPL3
    assert info.rhythm == 0


def test_voice_round_trip():
    voice = FmVoice(*range(1, 19))
    packed = voice.pack()
    assert list(packed) == list(range(1, 19))
    assert FmVoice.unpack(packed) == voice


def test_note_layout_and_round_trip():
    note = FmNote(voice=3, octave=4, fnum=0x2AE, key_on=1)
    packed = note.pack()
    assert len(packed) == 12
    assert packed[0] == 3 and packed[1] == 4
    assert FmNote.unpack(packed) == note


def test_params_round_trip():
    params = FmParams(1, 1, 0, 1, 2, 3, 4, 5, 6)
    assert FmParams.unpack(params.pack()) == params


def test_out_of_range_value_rejected():
    with pytest.raises(ValueError):
        FmVoice(volume=256).pack()


def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        FmParams.unpack(b"\x00")


def test_sbi_patch_round_trip():
    patch = SbiPatch(
        prog=5, bank=1, key=FM_KEY_2OP, name=b"piano", extension=b"ext", data=bytes(range(32))
    )
    restored = SbiPatch.unpack(patch.pack())
    assert restored == patch
    assert SbiPatch().key == FM_KEY_SBI


def test_sbi_name_too_long():
    with pytest.raises(ValueError):
        SbiPatch(name=b"n" * 26).pack()


def test_known_ioctl_numbers():
    ioctls = fm_ioctls()
    assert ioctls["RESET"] == 0x4821
    assert ioctls["INFO"] == 0x80024820
    assert ioctls["RESET"] == ioctl_number(IOC_NONE, "H", 0x21, 0)


def test_ioctl_fields_decode():
    value = ioctl_number(IOC_READ, "H", 0x20, 2)
    assert value >> 30 == IOC_READ
    assert (value >> 8) & 0xFF == ord("H")
    assert value & 0xFF == 0x20
    assert (value >> 16) & 0x3FFF == 2


def test_ioctl_numbers_distinct():
    values = list(fm_ioctls().values())
    assert len(set(values)) == len(values)


@pytest.mark.parametrize(
    "args",
    [(4, "H", 0, 0), (0, "HH", 0, 0), (0, "H", 256, 0), (0, "H", 0, 1 << 14)],
)
def test_ioctl_invalid_arguments(args):
    with pytest.raises(ValueError):
        ioctl_number(*args)