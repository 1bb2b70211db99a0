[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "puteremu"
version = "0.1.0"
description = "Building blocks of a small Z80 computer: CPU flag logic, banked memory, I/O ports, text video RAM and a keyboard matrix"
requires-python = ">=3.10"
dependencies = []
keywords = ["z80", "emulator", "retro", "cpu", "8-bit"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["puteremu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
