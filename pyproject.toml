[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lbparchive"
version = "2.5.0"
description = "Download archived LittleBigPlanet levels and write them as PS3 level backups"
requires-python = ">=3.10"
keywords = ["littlebigplanet", "lbp", "ps3", "savedata", "backup", "archive"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "pyyaml",
    "aiohttp",
    "pillow",
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
lbparchive = "lbparchive.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lbparchive"]

[tool.pytest.ini_options]
addopts = "-ra"
