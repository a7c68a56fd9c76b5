"""Parsing of a single printf-style format specification in a unified log message."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .errors import ParseError
from .printf import (
    ERROR_TYPES,
    format_alignment_left,
    format_alignment_left_space,
    format_alignment_right,
    format_alignment_right_space,
    format_left,
    format_right,
)

_log = logging.getLogger(__name__)

# Item types that carry a dynamic precision ahead of the actual value.
PRECISION_ITEMS = frozenset({0x10, 0x12})
# A number item of this type and zero size has also been seen as a dynamic width.
DYNAMIC_PRECISION_VALUE = 0x0
NUMBER_ITEM_TYPES = frozenset({0x0, 0x1, 0x2})

_LENGTH_CHARS = frozenset("hlwIztq")
_TYPE_CHARS = frozenset("cmCdiouxXeEfgGaAnpsSZP@")
_PRECISION_STOP_CHARS = frozenset("hljzZtqLdDiuUoOcCxXfFeEgGaASspPn%@")
_LENGTH_VALUES = frozenset({"h", "hh", "l", "ll", "w", "I", "z", "t", "q"})

_UNSIGNED_PATTERN = re.compile(r"\+?[0-9]+")
_U32_MAX = (1 << 32) - 1


@dataclass
class FirehoseItemInfo:
    """One value logged alongside a firehose format string."""

    message_strings: str = ""
    item_type: int = 0
    item_size: int = 0


def _span(text: str, chars: frozenset[str], *, inside: bool = True) -> tuple[str, str]:
    """Split text after the longest prefix whose characters are (or are not) in chars."""
    end = 0
    for char in text:
        if (char in chars) != inside:
            break
        end += 1
    return text[:end], text[end:]


def _span1(text: str, chars: frozenset[str], what: str, *, inside: bool = True) -> tuple[str, str]:
    matched, rest = _span(text, chars, inside=inside)
    if not matched:
        raise ParseError(f"expected {what} in format specification at {text!r}")
    return matched, rest


def _parse_unsigned(text: str) -> int | None:
    if not _UNSIGNED_PATTERN.fullmatch(text):
        return None
    return int(text)


def _scan_flags(formatter: str) -> tuple[bool, bool, bool, bool, int]:
    left_justify = plus_minus = hashtag = pad_zero = False
    width_index = 1
    for position, char in enumerate(formatter[1:], start=1):
        if char == "-":
            left_justify = True
        elif char == "+":
            plus_minus = True
        elif char == "#":
            hashtag = True
        elif char == "0":
            pad_zero = True
        else:
            width_index = position
            break
    return left_justify, plus_minus, hashtag, pad_zero, width_index


def parse_formatter(
    formatter: str,
    items: list[FirehoseItemInfo],
    item_type: int,
    item_index: int,
) -> str:
    """Render the item at item_index according to a printf format specification.

    Raises ParseError when the specification has no recognisable type.
    """
    index = item_index
    precision_value = 0

    if item_type in PRECISION_ITEMS:
        precision_value = items[index].item_size
        index += 1
        if index >= len(items):
            _log.error(
                "Index now greater than messages array. Index: %d. Message Array len: %d",
                index,
                len(items),
            )
            return "Failed to format string due index length"

    message = items[index].message_strings

    # A character conversion of a number item renders the number as a character.
    if formatter.lower().endswith("c") and items[index].item_type in NUMBER_ITEM_TYPES:
        code = _parse_unsigned(items[index].message_strings)
        if code is None or code > _U32_MAX:
            _log.error(
                "Failed to parse number item to char string: %r", items[index].message_strings
            )
            return "Failed to parse number item to char string"
        message = chr(code & 0xFF)

    left_justify, plus_minus, hashtag, pad_zero, width_index = _scan_flags(formatter)

    width, remaining = _span(formatter[width_index:], frozenset("0123456789"))

    if remaining.startswith("*"):
        if item_type == DYNAMIC_PRECISION_VALUE and items[index].item_size == 0:
            precision_value = items[index].item_size
            index += 1
            if index >= len(items):
                _log.error(
                    "Index now greater than messages array. Index: %d. Message Array len: %d",
                    index,
                    len(items),
                )
                return "Failed to format precision/dynamic string due index length"
            message = items[index].message_strings
        width = str(precision_value)
        remaining = remaining[1:]

    if remaining.startswith("."):
        _, remaining = _span1(remaining, frozenset("."), "'.'")
        precision_data, remaining = _span1(
            remaining, _PRECISION_STOP_CHARS, "precision", inside=False
        )
        if precision_data != "*":
            value = _parse_unsigned(precision_data)
            if value is None:
                _log.error("Failed to parse format precision value: %r", precision_data)
            else:
                precision_value = value
        elif precision_value != 0:
            # Dynamic precision uses the number of message items.
            precision_value = len(items)

    length_data, remaining = _span(remaining, _LENGTH_CHARS)
    if not length_data:
        length_data, remaining = _span1(remaining, _TYPE_CHARS, "format type")

    type_data = length_data
    if length_data in _LENGTH_VALUES:
        type_data, _ = _span1(remaining, _TYPE_CHARS, "format type")

    # Error codes are not mapped to their messages.
    if type_data in ERROR_TYPES:
        return f"Error code: {message}"

    if width:
        width_value = _parse_unsigned(width)
        if width_value is None:
            _log.error("Failed to parse format width value: %r", width)
            width_value = 0
        if pad_zero:
            align = format_alignment_left if left_justify else format_alignment_right
        else:
            align = format_alignment_left_space if left_justify else format_alignment_right_space
        return align(message, width_value, precision_value, type_data, plus_minus, hashtag)

    if left_justify:
        return format_left(message, precision_value, type_data, plus_minus, hashtag)
    return format_right(message, precision_value, type_data, plus_minus, hashtag)