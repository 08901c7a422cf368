[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sbitxkit"
version = "0.1.0"
description = "Station software pieces for an SDR transceiver: FFT filters, logbook with ADIF export, FT8 display markup, WSJT-X decodes, macros and settings stores"
requires-python = ">=3.10"
keywords = [
    "ham radio",
    "sdr",
    "ft8",
    "wsjt-x",
    "adif",
    "logbook",
    "fir filter",
    "macros",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
    "Typing :: Typed",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sbitx-resample = "sbitxkit.resampler:main"

[tool.hatch.build.targets.wheel]
packages = ["sbitxkit"]

[tool.hatch.build.targets.sdist]
include = [
    "sbitxkit",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
