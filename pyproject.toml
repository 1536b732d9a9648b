[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cliamp"
version = "0.1.0"
description = "A terminal music player with a 10-band equalizer, spectrum visualizer and playlist"
requires-python = ">=3.10"
keywords = ["mp3", "music", "player", "terminal", "tui", "equalizer", "spectrum"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
    "Topic :: Multimedia :: Sound/Audio :: Players :: MP3",
]
dependencies = [
    "numpy",
    "pygame",
    "blessed",
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cliamp = "cliamp.app:main"

[tool.hatch.build.targets.wheel]
packages = ["cliamp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
