[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "unifiedlog"
version = "0.3.2"
description = "Parsers for macOS Unified Log structures: tracev3 chunk preambles and headers, timesync data and printf-style message formatting"
requires-python = ">=3.10"
keywords = ["forensics", "macos", "unifiedlog", "tracev3", "timesync"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["unifiedlog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
