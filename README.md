# mfccwords

A small isolated-word recognizer. It records speech and cuts it into single
utterances. It computes mel-frequency cepstral coefficients (MFCC) for each
utterance. It then compares each utterance with stored words by dynamic time
warping.

All audio is 16-bit signed mono at 48000 Hz.

## Installation

```
pip install .
```

Recording and playback run the ALSA command-line tools `arecord` and `aplay`.
These tools must be installed and on your `PATH`.

## Command line

```
mfccwords [--words DIR] [--waves DIR] [--device NAME]
```

Options:

- `--words` sets the directory of learned words. The default is `words`.
- `--waves` sets the directory for recordings. The default is `waves`.
- `--device` sets the audio device. By default the `default` device is used.

The program shows a prompt with four choices:

- `n`: learn new words. Speak after "Please speak now". Recording starts once
  voice is detected. It stops when the speech dies away. Each utterance found
  in the recording is then processed in turn:
  - You are asked for a name. Typing `x`, or nothing, skips the utterance.
  - The features of a named utterance are stored under the words directory.
  - Its audio is written to `<name>.wav` in the waves directory and played back.
- `l`: list the stored word names.
- `d`: dictate. Speak, and the program prints `maybe is <name> <distance>`
  for each utterance whose closest stored word is nearer than 3.5.
- `e`: exit. End of input also exits.

## Library use

```python
from mfccwords.wave import read_wave
from mfccwords.app import features_for, best_match
from mfccwords.split import split
from mfccwords.words import WordStore

samples = read_wave("sentence.wav")   # mono 16-bit PCM at 48000 Hz
known = WordStore("words").load()
for utterance in split(samples):
    print(best_match(features_for(utterance), known))  # (name, distance) or None
```

### Modules

- `mfccwords.fft`
  - `fft(values)` returns the DFT divided by its length and conjugated.
  - The length must be a power of two.
- `mfccwords.frame`
  - `make_frames_hamming(samples)` returns Hamming-windowed magnitude spectra
    of 512 samples, mean-normalised.
  - `mel_filter_bank()` returns the 26 triangular filters.
  - `mfcc_features(frames)` returns 26 MFCC values per frame.
- `mfccwords.compare`
  - `compare(features1, features2)` returns the DTW distance normalised by
    the lengths of both sequences.
  - Smaller values mean the two words are more alike.
- `mfccwords.split`
  - `split(samples)` returns the voiced segments of a signal as int16 arrays.
  - A block of 512 samples counts as voiced when its spread is above the
    average spread of all blocks.
- `mfccwords.wave`
  - `read_wave(path)` and `write_wave(path, samples)` read and write mono
    16-bit PCM wave files at 48000 Hz.
  - Any other format raises `WaveFormatError`.
- `mfccwords.words`
  - `WordStore(directory)` keeps one text file of features per word.
  - Its methods are `save(name, features)`, `load()` (which returns `Word`
    objects sorted by name) and `names()`.
- `mfccwords.audio`
  - `Recorder`, which can be used as a context manager, records from start to
    stop.
  - `play(samples, device)` plays audio.
  - `list_devices()` returns `Device` entries marked Input, Output or Both.
  - `parse_device_list(text)` parses such a listing.
  - `read_blocks(device)` yields 30 ms blocks.
  - `vad_collect(...)` and `vad_record(...)` capture one utterance with voice
    activity detection.
  - Failures raise `AudioError`.
- `mfccwords.app`
  - `features_for`, `best_match`, `learn_words` and `recognize_words` are
    the steps behind the command.
  - `MfccController` holds an `MfccState` and runs a background thread that
    polls that state.
- `mfccwords.fm`
  - Packs and unpacks the OPL2/OPL3 FM synthesizer structures: `FmInfo`,
    `FmVoice`, `FmNote`, `FmParams` and `SbiPatch`.
  - `ioctl_number` and `fm_ioctls()` compute ioctl request numbers.
- `mfccwords.alsadefs`
  - `ProtocolVersion` encodes and decodes plugin protocol versions.
  - `library_version()` returns the library version.
  - `CtlExtAccess` holds control access flags.
  - `CardInfo` checks card fields against their fixed-size slots.
  - `ExtplugConstraints` holds list and range constraints on the format and
    channel parameters.

## Limitations

- `VoiceDetector` is a simple energy detector. It keeps an adaptive noise
  floor and is not a trained speech model.
- `MfccController` only tracks its state. It runs no recognition job in the
  background, and `result()` returns no result.
- `mfccwords.fm` and `mfccwords.alsadefs` only describe data layouts and
  numbers. They do not open or drive any sound device.