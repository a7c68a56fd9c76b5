"""printf-style rendering of individual unified log message values."""

from __future__ import annotations

import logging
import math
import re
import struct
from decimal import Decimal

_log = logging.getLogger(__name__)

FLOAT_TYPES = frozenset({"f", "F", "e", "E", "g", "G"})
INT_TYPES = frozenset({"d", "D", "i", "u"})
HEX_TYPES = frozenset({"x", "X", "a", "A", "p"})
OCTAL_TYPES = frozenset({"o", "O"})
ERROR_TYPES = frozenset({"m"})
STRING_TYPES = frozenset({"c", "s", "@", "S", "C", "P"})

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1
_U64_MASK = (1 << 64) - 1

_MISMATCH_HINT = (
    "Log message possibly incorrectly formatted ex: printf(%%u, \"message\") instead of "
    "printf(%%u, 10). Apple may record message as "
    "'<decode: mismatch for [%%u] got [STRING sz:10]>'"
)


def _parse_i64(message: str) -> int | None:
    if not _INT_PATTERN.fullmatch(message):
        return None
    value = int(message)
    if not _I64_MIN <= value <= _I64_MAX:
        return None
    return value


def parse_float(message: str) -> float:
    """Interpret a logged 64-bit integer string as the bit pattern of a double."""
    bits = _parse_i64(message)
    if bits is None:
        _log.warning("Failed to parse float log message value: %s. " + _MISMATCH_HINT, message)
        return 0.0
    return struct.unpack("<d", struct.pack("<Q", bits & _U64_MASK))[0]


def parse_int(message: str) -> int:
    """Parse a logged signed 64-bit integer string, returning 0 if it is not one."""
    value = _parse_i64(message)
    if value is None:
        _log.warning("Failed to parse int log message value: %s. " + _MISMATCH_HINT, message)
        return 0
    return value


def _display_decimals(value: float) -> int:
    """Number of fractional digits in the shortest plain decimal form of value."""
    if not math.isfinite(value):
        return 0
    exponent = Decimal(repr(value)).normalize().as_tuple().exponent
    return max(0, -int(exponent))


def _format_float(value: float, precision: int) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return format(value, f".{precision}f")


def _render(
    message: str,
    precision: int,
    type_data: str,
    hashtag: bool,
    *,
    force_octal_prefix: bool = False,
) -> str | None:
    """Render a value for its printf type, or None when the type is not handled."""
    if type_data in FLOAT_TYPES:
        value = parse_float(message)
        if precision == 0:
            precision = _display_decimals(value)
        return _format_float(value, precision)
    if type_data in INT_TYPES:
        # Precision has no effect on integers.
        return str(parse_int(message))
    if type_data in STRING_TYPES:
        return message if precision == 0 else message[:precision]
    if type_data in HEX_TYPES:
        digits = format(parse_int(message) & _U64_MASK, "X")
        return "0x" + digits if hashtag else digits
    if type_data in OCTAL_TYPES:
        digits = format(parse_int(message) & _U64_MASK, "o")
        return "0o" + digits if hashtag or force_octal_prefix else digits
    return None


def _aligned(
    message: str,
    width: int,
    precision: int,
    type_data: str,
    plus_minus: bool,
    hashtag: bool,
    *,
    left: bool,
    fill: str,
) -> str:
    rendered = _render(message, precision, type_data, hashtag)
    if rendered is None:
        return message
    plus = "+" if plus_minus else ""
    width = max(0, width - len(plus))
    padded = rendered.ljust(width, fill) if left else rendered.rjust(width, fill)
    return plus + padded


def format_alignment_left(
    message: str, width: int, precision: int, type_data: str, plus_minus: bool, hashtag: bool
) -> str:
    """Left-align the value in width, padding with zeros."""
    return _aligned(message, width, precision, type_data, plus_minus, hashtag, left=True, fill="0")


def format_alignment_right(
    message: str, width: int, precision: int, type_data: str, plus_minus: bool, hashtag: bool
) -> str:
    """Right-align the value in width, padding with zeros."""
    return _aligned(message, width, precision, type_data, plus_minus, hashtag, left=False, fill="0")


def format_alignment_left_space(
    message: str, width: int, precision: int, type_data: str, plus_minus: bool, hashtag: bool
) -> str:
    """Left-align the value in width, padding with spaces."""
    return _aligned(message, width, precision, type_data, plus_minus, hashtag, left=True, fill=" ")


def format_alignment_right_space(
    message: str, width: int, precision: int, type_data: str, plus_minus: bool, hashtag: bool
) -> str:
    """Right-align the value in width, padding with spaces."""
    return _aligned(message, width, precision, type_data, plus_minus, hashtag, left=False, fill=" ")


def format_left(
    message: str, precision: int, type_data: str, plus_minus: bool, hashtag: bool
) -> str:
    """Render the value left-aligned with no width."""
    rendered = _render(message, precision, type_data, hashtag)
    if rendered is None:
        return message
    return ("+" if plus_minus else "") + rendered


def format_right(
    message: str, precision: int, type_data: str, plus_minus: bool, hashtag: bool
) -> str:
    """Render the value right-aligned with no width; octal always carries its prefix."""
    rendered = _render(message, precision, type_data, hashtag, force_octal_prefix=True)
    if rendered is None:
        return message
    return ("+" if plus_minus else "") + rendered