"""Parsers for macOS Unified Log structures: chunk preambles, tracev3 headers, timesync data and message formatting."""

__version__ = "0.3.2"