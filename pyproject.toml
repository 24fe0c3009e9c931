[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "picogps"
version = "0.1.0"
description = "Read NMEA sentences from a serial GPS receiver and decode position, time and fix information"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["gps", "nmea", "serial", "uart", "gnss"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
picogps = "picogps.app:main"

[tool.hatch.build.targets.wheel]
packages = ["picogps"]

[tool.pytest.ini_options]
addopts = "-ra"
