"""The header chunk at the start of a tracev3 file."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from .errors import ParseError

_log = logging.getLogger(__name__)

_HEADER = struct.Struct("<IIQIIQQIIIIIIQIIII16s32sII16sIIII48s")


@dataclass
class HeaderChunk:
    """Boot, timebase and system details recorded in a tracev3 header."""

    chunk_tag: int = 0
    chunk_sub_tag: int = 0
    chunk_data_size: int = 0
    mach_time_numerator: int = 0
    mach_time_denominator: int = 0
    continous_time: int = 0
    unknown_time: int = 0
    unknown: int = 0
    bias_min: int = 0
    daylight_savings: int = 0
    unknown_flags: int = 0
    sub_chunk_tag: int = 0
    sub_chunk_data_size: int = 0
    sub_chunk_continous_time: int = 0
    sub_chunk_tag_2: int = 0
    sub_chunk_tag_data_size_2: int = 0
    unknown_2: int = 0
    unknown_3: int = 0
    build_version_string: str = ""
    hardware_model_string: str = ""
    sub_chunk_tag_3: int = 0
    sub_chunk_tag_data_size_3: int = 0
    boot_uuid: str = ""
    logd_pid: int = 0
    logd_exit_status: int = 0
    sub_chunk_tag_4: int = 0
    sub_chunk_tag_data_size_4: int = 0
    timezone_path: str = ""


def _decode_padded(raw: bytes, what: str) -> str:
    try:
        return raw.decode("utf-8").rstrip("\0")
    except UnicodeDecodeError as err:
        _log.warning("Failed to get %s from header: %s", what, err)
        return ""


def parse_header(data: bytes) -> tuple[HeaderChunk, bytes]:
    """Parse a tracev3 header chunk and return it with the bytes that follow."""
    if len(data) < _HEADER.size:
        raise ParseError(f"header chunk needs {_HEADER.size} bytes, got {len(data)}")

    (
        chunk_tag,
        chunk_sub_tag,
        chunk_data_size,
        mach_time_numerator,
        mach_time_denominator,
        continous_time,
        unknown_time,
        unknown,
        bias_min,
        daylight_savings,
        unknown_flags,
        sub_chunk_tag,
        sub_chunk_data_size,
        sub_chunk_continous_time,
        sub_chunk_tag_2,
        sub_chunk_tag_data_size_2,
        unknown_2,
        unknown_3,
        build_version,
        hardware_model,
        sub_chunk_tag_3,
        sub_chunk_tag_data_size_3,
        boot_uuid,
        logd_pid,
        logd_exit_status,
        sub_chunk_tag_4,
        sub_chunk_tag_data_size_4,
        timezone_path,
    ) = _HEADER.unpack_from(data)

    header = HeaderChunk(
        chunk_tag=chunk_tag,
        chunk_sub_tag=chunk_sub_tag,
        chunk_data_size=chunk_data_size,
        mach_time_numerator=mach_time_numerator,
        mach_time_denominator=mach_time_denominator,
        continous_time=continous_time,
        unknown_time=unknown_time,
        unknown=unknown,
        bias_min=bias_min,
        daylight_savings=daylight_savings,
        unknown_flags=unknown_flags,
        sub_chunk_tag=sub_chunk_tag,
        sub_chunk_data_size=sub_chunk_data_size,
        sub_chunk_continous_time=sub_chunk_continous_time,
        sub_chunk_tag_2=sub_chunk_tag_2,
        sub_chunk_tag_data_size_2=sub_chunk_tag_data_size_2,
        unknown_2=unknown_2,
        unknown_3=unknown_3,
        build_version_string=_decode_padded(build_version, "build version"),
        hardware_model_string=_decode_padded(hardware_model, "hardware info"),
        sub_chunk_tag_3=sub_chunk_tag_3,
        sub_chunk_tag_data_size_3=sub_chunk_tag_data_size_3,
        boot_uuid=format(int.from_bytes(boot_uuid, "big"), "X"),
        logd_pid=logd_pid,
        logd_exit_status=logd_exit_status,
        sub_chunk_tag_4=sub_chunk_tag_4,
        sub_chunk_tag_data_size_4=sub_chunk_tag_data_size_4,
        timezone_path=_decode_padded(timezone_path, "timezone path"),
    )
    return header, data[_HEADER.size:]