[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mfccwords"
version = "0.1.0"
description = "Isolated word recognition with MFCC features and dynamic time warping"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["speech", "mfcc", "dtw", "voice", "recognition", "audio", "alsa"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Speech",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mfccwords = "mfccwords.app:main"

[tool.hatch.build.targets.wheel]
packages = ["mfccwords"]

[tool.pytest.ini_options]
addopts = "-ra"
