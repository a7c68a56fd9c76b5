import re

import pytest

from unifiedlog.errors import ParseError
from unifiedlog.formatter import FirehoseItemInfo
from unifiedlog.message import (
    format_firehose_log_message,
    parse_signpost_format,
    parse_type_formatter,
)

REGEX = (
    r"(%(?:(?:\{[^}]+}?)(?:[-+0#]{0,5})(?:\d+|\*)?(?:\.(?:\d+|\*))?"
    r"(?:h|hh|l|ll|w|I|z|t|q|I32|I64)?[cmCdiouxXeEfgGaAnpsSZP@%}]"
    r"|(?:[-+0 #]{0,5})(?:\d+|\*)?(?:\.(?:\d+|\*))?"
    r"(?:h|hh|l||q|t|ll|w|I|z|I32|I64)?[cmCdiouxXeEfgGaAnpsSZP@%]))"
)


@pytest.fixture
def pattern():
    return re.compile(REGEX)


def test_format_firehose_log_message(pattern):
    items = [FirehoseItemInfo(message_strings="796.100", item_type=34, item_size=0)]
    result = format_firehose_log_message(
        "opendirectoryd (build %{public}s) launched...", items, pattern
    )
    assert result == "opendirectoryd (build 796.100) launched..."


def test_default_pattern_matches_explicit(pattern):
    items = [FirehoseItemInfo(message_strings="796.100", item_type=34, item_size=0)]
    text = "opendirectoryd (build %{public}s) launched..."
    assert format_firehose_log_message(text, items) == format_firehose_log_message(
        text, items, pattern
    )


def test_bad_format_options(pattern):
    message = "PAVAbstractVideoInterface.cpp::%d] DCPAV[%d] %s::%s Setting %s syncWidth = %u"
    items = [
        FirehoseItemInfo("406", 0, 0),
        FirehoseItemInfo("258", 0, 0),
        FirehoseItemInfo("DCPAVSimpleVideoInterface", 32, 25),
        FirehoseItemInfo("setColorElement", 32, 15),
        FirehoseItemInfo("3", 0, 0),
        FirehoseItemInfo("All", 32, 3),
        FirehoseItemInfo("89", 0, 0),
    ]
    result = format_firehose_log_message(message, items, pattern)
    assert result == (
        "PAVAbstractVideoInterface.cpp::406] DCPAV[258] "
        "DCPAVSimpleVideoInterface::setColorElement Setting 3 syncWidth = 0"
    )


def test_empty_format_and_items(pattern):
    assert format_firehose_log_message("", [], pattern) == ""


def test_empty_format_uses_first_item(pattern):
    items = [FirehoseItemInfo("raw text", 32, 8)]
    assert format_firehose_log_message("", items, pattern) == "raw text"


def test_literal_percent(pattern):
    items = [FirehoseItemInfo("5", 0, 0)]
    assert format_firehose_log_message("%d%% done", items, pattern) == "5% done"


def test_space_formatter_is_left_alone(pattern):
    items = [FirehoseItemInfo("x", 32, 1)]
    assert format_firehose_log_message("100% done %s", items, pattern) == "100% done x"


def test_missing_message_data(pattern):
    items = [FirehoseItemInfo("a", 32, 1)]
    result = format_firehose_log_message("%s and %s", items, pattern)
    assert result == "a and <Missing message data>"


def test_private_string(pattern):
    items = [FirehoseItemInfo("", 0x21, 0)]
    assert format_firehose_log_message("name: %s", items, pattern) == "name: <private>"


def test_private_number(pattern):
    items = [FirehoseItemInfo("", 0x1, 0x8000), FirehoseItemInfo("", 0x1, 0x8000)]
    result = format_firehose_log_message("[0x%lx - 0x%lx]", items, pattern)
    assert result == "[0x<private> - 0x<private>]"


def test_private_with_type(pattern):
    items = [FirehoseItemInfo("", 0x41, 0)]
    result = format_firehose_log_message("id %{private}@", items, pattern)
    assert result == "id <private>"


def test_type_annotation_without_conversion_is_literal(pattern):
    items = [FirehoseItemInfo("unused", 32, 6)]
    result = format_firehose_log_message("value %{public} here", items, pattern)
    assert result == "value %{public} here"


def test_signpost_in_message(pattern):
    items = [FirehoseItemInfo("1", 2, 4)]
    result = format_firehose_log_message(
        "took %{public, signpost.description:begin_time}llu ns", items, pattern
    )
    assert result == "took 1 (signpost.description:begin_time) ns"


def test_replacement_containing_formatter(pattern):
    items = [FirehoseItemInfo("%s", 32, 2), FirehoseItemInfo("b", 32, 1)]
    assert format_firehose_log_message("%s-%s", items, pattern) == "%s-b"


def test_parse_type_formatter_public():
    items = [FirehoseItemInfo("test", 2, 4)]
    assert parse_type_formatter("%{public}s", items, 2, 0) == "test"


def test_parse_type_formatter_signpost():
    items = [FirehoseItemInfo("1", 2, 4)]
    result = parse_type_formatter("%{public, signpost.description:begin_time}llu", items, 2, 0)
    assert result == "1 (signpost.description:begin_time)"


def test_parse_type_formatter_without_brace():
    items = [FirehoseItemInfo("1", 2, 4)]
    with pytest.raises(ParseError):
        parse_type_formatter("%d", items, 2, 0)


def test_parse_signpost_format():
    assert (
        parse_signpost_format("%{public, signpost.description:begin_time")
        == "signpost.description:begin_time"
    )


def test_parse_signpost_format_leading_signpost():
    assert (
        parse_signpost_format("%{signpost.telemetry:number1,name=Example")
        == "signpost.telemetry:number1"
    )


def test_parse_signpost_format_bad_prefix():
    with pytest.raises(ParseError):
        parse_signpost_format("public, signpost.description")


def test_parse_signpost_format_no_annotation():
    with pytest.raises(ParseError):
        parse_signpost_format("%{public")