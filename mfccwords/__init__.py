"""Isolated word recognition with MFCC features, dynamic time warping and ALSA-tool audio."""

__version__ = "0.1.0"