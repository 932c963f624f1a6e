[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nodesynth"
version = "0.1.0"
description = "Node-based modular audio synthesis graph: oscillators, envelopes, filters and effects driven by MIDI key input"
requires-python = ">=3.10"
dependencies = []
keywords = ["synthesizer", "audio", "adsr", "oscillator", "filter", "midi", "modular"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nodesynth"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
