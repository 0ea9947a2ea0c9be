[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wavedraw"
version = "0.1.0"
description = "Render audio waveform min/max data as PNG images, with option parsing and colour handling"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["audio", "waveform", "png", "visualisation", "peaks"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["wavedraw"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
