"""Assembly of complete unified log messages from a format string and logged values."""

from __future__ import annotations

import logging
import re

from .errors import ParseError
from .formatter import (
    DYNAMIC_PRECISION_VALUE,
    PRECISION_ITEMS,
    FirehoseItemInfo,
    parse_formatter,
)

_log = logging.getLogger(__name__)

MESSAGE_PATTERN = re.compile(
    r"(%(?:(?:\{[^}]+}?)(?:[-+0#]{0,5})(?:\d+|\*)?(?:\.(?:\d+|\*))?"
    r"(?:h|hh|l|ll|w|I|z|t|q|I32|I64)?[cmCdiouxXeEfgGaAnpsSZP@%}]"
    r"|(?:[-+0 #]{0,5})(?:\d+|\*)?(?:\.(?:\d+|\*))?"
    r"(?:h|hh|l||q|t|ll|w|I|z|I32|I64)?[cmCdiouxXeEfgGaAnpsSZP@%]))"
)

MISSING_DATA = "<Missing message data>"
PRIVATE = "<private>"

# Item types that, when empty and of zero size, stand for a redacted value.
_PRIVATE_STRINGS = frozenset({0x1, 0x21, 0x31, 0x41})
_PRIVATE_NUMBER = 0x1
_PRIVATE_MESSAGE = 0x8000


def parse_signpost_format(signpost_format: str) -> str:
    """Extract the signpost annotation from a format type such as '%{public, signpost...'."""
    prefix_end = 0
    for char in signpost_format:
        if char not in "%{":
            break
        prefix_end += 1
    if prefix_end == 0:
        raise ParseError(f"signpost format does not start with '%{{': {signpost_format!r}")
    parts = signpost_format[prefix_end:].split(",")
    if signpost_format.startswith("%{sign"):
        return parts[0]
    if len(parts) < 2:
        raise ParseError(f"signpost format has no annotation: {signpost_format!r}")
    return parts[1].strip()


def parse_type_formatter(
    formatter: str,
    items: list[FirehoseItemInfo],
    item_type: int,
    item_index: int,
) -> str:
    """Render a value for a formatter carrying a type, such as %{public}s or %{errno}d.

    Raises ParseError when the formatter has no closing brace or cannot be parsed.
    """
    close = formatter.find("}")
    if close < 0:
        raise ParseError(f"type formatter has no closing brace: {formatter!r}")
    format_type, spec = formatter[:close], formatter[close:]

    message = parse_formatter(spec, items, item_type, item_index)
    if "signpost" in format_type:
        message = f"{message} ({parse_signpost_format(format_type)})"
    return message


def _is_private(item: FirehoseItemInfo) -> bool:
    return (
        item.item_type in _PRIVATE_STRINGS
        and not item.message_strings
        and item.item_size == 0
    ) or (item.item_type == _PRIVATE_NUMBER and item.item_size == _PRIVATE_MESSAGE)


def _render_values(format_string: str, items: list[FirehoseItemInfo], pattern: re.Pattern[str]):
    """Yield each printf formatter in the format string with the text replacing it."""
    item_index = 0
    for match in pattern.finditer(format_string):
        spec = match.group(0)
        if spec.startswith("% "):
            continue
        if spec == "%%":
            yield spec, "%"
            continue
        if item_index >= len(items):
            yield spec, MISSING_DATA
            continue

        # A type annotation with no conversion is kept literally.
        if spec.startswith("%{") and spec.endswith("}"):
            yield spec, spec
            continue

        if items[item_index].item_type in PRECISION_ITEMS:
            item_index += 1
        if (
            item_index < len(items)
            and items[item_index].item_type == DYNAMIC_PRECISION_VALUE
            and items[item_index].item_size == 0
            and "%*" in spec
        ):
            item_index += 1
        if item_index >= len(items):
            yield spec, MISSING_DATA
            continue

        item = items[item_index]
        rendered = item.message_strings
        if _is_private(item):
            rendered = PRIVATE
        elif spec.startswith("%{"):
            try:
                rendered = parse_type_formatter(spec, items, item.item_type, item_index)
            except ParseError as err:
                _log.warning("Failed to format message type ex: public/private: %s", err)
        else:
            try:
                rendered = parse_formatter(spec, items, item.item_type, item_index)
            except ParseError as err:
                _log.warning("Failed to format message: %s", err)

        item_index += 1
        yield spec, rendered


def format_firehose_log_message(
    format_string: str,
    items: list[FirehoseItemInfo],
    pattern: re.Pattern[str] | None = None,
) -> str:
    """Build a log message by substituting logged values into a printf-style format string."""
    if pattern is None:
        pattern = MESSAGE_PATTERN
    _log.info("Unified log base message: %r", format_string)
    _log.info("Unified log entry strings: %r", items)

    if not format_string:
        return items[0].message_strings if items else ""

    replacements = list(_render_values(format_string, items, pattern))

    # Split rather than replace: a substituted value may itself contain a formatter.
    parts: list[str] = []
    remaining = format_string
    for spec, rendered in replacements:
        before, found, after = remaining.partition(spec)
        if not found:
            _log.error(
                "Failed to split log message (%s) by printf formatter: %s", remaining, spec
            )
            continue
        parts.append(before)
        parts.append(rendered)
        remaining = after
    parts.append(remaining)
    return "".join(parts)