"""The 16-byte preamble that starts every chunk of a tracev3 file."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import ParseError

_PREAMBLE = struct.Struct("<IIQ")


@dataclass(frozen=True)
class LogPreamble:
    """Tag, sub tag and data size of a tracev3 chunk."""

    chunk_tag: int
    chunk_sub_tag: int
    chunk_data_size: int

    SIZE = _PREAMBLE.size


def parse_preamble(data: bytes) -> tuple[LogPreamble, bytes]:
    """Read a chunk preamble and return it with the bytes that follow it."""
    if len(data) < _PREAMBLE.size:
        raise ParseError(
            f"chunk preamble needs {_PREAMBLE.size} bytes, got {len(data)}"
        )
    chunk_tag, chunk_sub_tag, chunk_data_size = _PREAMBLE.unpack_from(data)
    return LogPreamble(chunk_tag, chunk_sub_tag, chunk_data_size), data[_PREAMBLE.size:]


def detect_preamble(data: bytes) -> LogPreamble:
    """Read a chunk preamble without consuming the input."""
    preamble, _ = parse_preamble(data)
    return preamble