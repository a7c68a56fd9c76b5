import pytest

from unifiedlog.errors import ParseError
from unifiedlog.header import parse_header

HEADER_BYTES = bytes(
    [
        0, 16, 0, 0, 17, 0, 0, 0, 208, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0, 15, 105,
        217, 162, 204, 126, 0, 0, 48, 215, 18, 98, 0, 0, 0, 0, 203, 138, 9, 0, 44, 1, 0, 0, 0,
        0, 0, 0, 1, 0, 0, 0, 0, 97, 0, 0, 8, 0, 0, 0, 6, 112, 124, 198, 169, 153, 1, 0, 1, 97,
        0, 0, 56, 0, 0, 0, 7, 0, 0, 0, 8, 0, 0, 0, 50, 49, 65, 53, 53, 57, 0, 0, 0, 0, 0, 0, 0,
        0, 0, 0, 77, 97, 99, 66, 111, 111, 107, 80, 114, 111, 49, 54, 44, 49, 0, 0, 0, 0, 0, 0,
        0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 97, 0, 0, 24, 0, 0, 0, 195, 32, 184, 206, 151,
        250, 77, 165, 159, 49, 125, 57, 46, 56, 156, 234, 85, 0, 0, 0, 0, 0, 0, 0, 3, 97, 0, 0,
        48, 0, 0, 0, 47, 118, 97, 114, 47, 100, 98, 47, 116, 105, 109, 101, 122, 111, 110, 101,
        47, 122, 111, 110, 101, 105, 110, 102, 111, 47, 65, 109, 101, 114, 105, 99, 97, 47, 78,
        101, 119, 95, 89, 111, 114, 107, 0, 0, 0, 0, 0, 0,
    ]
)


def test_parse_header():
    header, rest = parse_header(HEADER_BYTES)

    assert rest == b""
    assert header.chunk_tag == 0x1000
    assert header.chunk_sub_tag == 0x11
    assert header.mach_time_numerator == 1
    assert header.mach_time_denominator == 1
    assert header.continous_time == 139417370585359
    assert header.unknown_time == 1645401904
    assert header.unknown == 625355
    assert header.bias_min == 300
    assert header.daylight_savings == 0
    assert header.unknown_flags == 1
    assert header.sub_chunk_tag == 24832
    assert header.sub_chunk_data_size == 8
    assert header.sub_chunk_continous_time == 450429435277318
    assert header.sub_chunk_tag_2 == 24833
    assert header.sub_chunk_tag_data_size_2 == 56
    assert header.unknown_2 == 7
    assert header.unknown_3 == 8
    assert header.build_version_string == "21A559"
    assert header.hardware_model_string == "MacBookPro16,1"
    assert header.sub_chunk_tag_3 == 24834
    assert header.sub_chunk_tag_data_size_3 == 24
    assert header.boot_uuid == "C320B8CE97FA4DA59F317D392E389CEA"
    assert header.logd_pid == 85
    assert header.logd_exit_status == 0
    assert header.sub_chunk_tag_4 == 24835
    assert header.sub_chunk_tag_data_size_4 == 48
    assert header.timezone_path == "/var/db/timezone/zoneinfo/America/New_York"


def test_trailing_bytes_are_returned():
    _, rest = parse_header(HEADER_BYTES + b"\x0b\x60")
    assert rest == b"\x0b\x60"


def test_truncated_header_raises():
    with pytest.raises(ParseError):
        parse_header(HEADER_BYTES[:100])


def test_invalid_utf8_timezone_leaves_path_empty():
    corrupted = HEADER_BYTES[:176] + b"\xff" * 48
    header, _ = parse_header(corrupted)
    assert header.timezone_path == ""
    assert header.hardware_model_string == "MacBookPro16,1"