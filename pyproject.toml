[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "canzone"
version = "0.1.0"
description = "Streaming client building blocks: playback configuration and sinks, catalogue metadata models and a zeroconf discovery endpoint."
requires-python = ">=3.10"
keywords = ["audio", "streaming", "metadata", "zeroconf", "playback", "pcm"]
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
    "Framework :: AsyncIO",
    "Topic :: Multimedia :: Sound/Audio :: Players",
]
dependencies = [
    "aiohttp",
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["canzone"]

[tool.hatch.build.targets.sdist]
include = ["canzone", "tests", "README.md", "pyproject.toml"]

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
