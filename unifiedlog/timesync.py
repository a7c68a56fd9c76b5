"""Timesync files: boot records and the kernel/wall clock pairs used to date log entries."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from fractions import Fraction

from .errors import ParseError

_log = logging.getLogger(__name__)

BOOT_SIGNATURE = 0xBBB0
RECORD_SIGNATURE = 0x207354

_BOOT = struct.Struct("<HHI16sIIqII")
_RECORD = struct.Struct("<IIQqII")
_SIGNATURE = struct.Struct("<I")

# Apple Silicon mach time has to be scaled by 125/3 to give nanoseconds.
_ARM_TIMEBASE = (125, 3)


@dataclass
class Timesync:
    """A kernel (mach continuous) time paired with the UTC wall time in nanoseconds."""

    signature: int = 0
    unknown_flags: int = 0
    kernel_time: int = 0
    walltime: int = 0
    timezone: int = 0
    daylight_savings: int = 0


@dataclass
class TimesyncBoot:
    """A boot header of a timesync file together with its timesync records."""

    signature: int = 0
    header_size: int = 0
    unknown: int = 0
    boot_uuid: str = ""
    timebase_numerator: int = 0
    timebase_denominator: int = 0
    boot_time: int = 0
    timezone_offset_mins: int = 0
    daylight_savings: int = 0
    timesync: list[Timesync] = field(default_factory=list)


def parse_timesync_boot(data: bytes) -> tuple[TimesyncBoot, bytes]:
    """Parse a timesync boot header and return it with the bytes that follow."""
    if len(data) < 2:
        raise ParseError(f"timesync boot header needs {_BOOT.size} bytes, got {len(data)}")
    (signature,) = struct.unpack_from("<H", data)
    if signature != BOOT_SIGNATURE:
        _log.error(
            "Incorrect Timesync boot header signature. Expected %d. Got: %d",
            BOOT_SIGNATURE,
            signature,
        )
        raise ParseError(
            f"incorrect timesync boot signature: expected {BOOT_SIGNATURE:#x}, got {signature:#x}"
        )
    if len(data) < _BOOT.size:
        raise ParseError(f"timesync boot header needs {_BOOT.size} bytes, got {len(data)}")

    (
        signature,
        header_size,
        unknown,
        boot_uuid,
        timebase_numerator,
        timebase_denominator,
        boot_time,
        timezone_offset_mins,
        daylight_savings,
    ) = _BOOT.unpack_from(data)

    boot = TimesyncBoot(
        signature=signature,
        header_size=header_size,
        unknown=unknown,
        boot_uuid=format(int.from_bytes(boot_uuid, "big"), "X"),
        timebase_numerator=timebase_numerator,
        timebase_denominator=timebase_denominator,
        boot_time=boot_time,
        timezone_offset_mins=timezone_offset_mins,
        daylight_savings=daylight_savings,
    )
    return boot, data[_BOOT.size:]


def parse_timesync(data: bytes) -> tuple[Timesync, bytes]:
    """Parse a single timesync record and return it with the bytes that follow."""
    if len(data) < _SIGNATURE.size:
        raise ParseError(f"timesync record needs {_RECORD.size} bytes, got {len(data)}")
    (signature,) = _SIGNATURE.unpack_from(data)
    if signature != RECORD_SIGNATURE:
        _log.error(
            "Incorrect Timesync record header signature. Expected %d. Got: %d",
            RECORD_SIGNATURE,
            signature,
        )
        raise ParseError(
            f"incorrect timesync record signature: expected {RECORD_SIGNATURE:#x}, "
            f"got {signature:#x}"
        )
    if len(data) < _RECORD.size:
        raise ParseError(f"timesync record needs {_RECORD.size} bytes, got {len(data)}")

    values = _RECORD.unpack_from(data)
    return Timesync(*values), data[_RECORD.size:]


def _merge_boot(boots: dict[str, TimesyncBoot], boot: TimesyncBoot) -> None:
    existing = boots.get(boot.boot_uuid)
    if existing is not None:
        existing.timesync.extend(boot.timesync)
    else:
        boots[boot.boot_uuid] = boot


def parse_timesync_data(data: bytes) -> dict[str, TimesyncBoot]:
    """Parse a whole timesync file into boot records keyed by boot UUID.

    Records for a boot UUID that appears more than once are merged into one entry.
    """
    boots: dict[str, TimesyncBoot] = {}
    current = TimesyncBoot()
    remaining = data

    while remaining:
        if len(remaining) < _SIGNATURE.size:
            raise ParseError(
                f"timesync data needs {_SIGNATURE.size} bytes for a signature, "
                f"got {len(remaining)}"
            )
        (signature,) = _SIGNATURE.unpack_from(remaining)
        if signature == RECORD_SIGNATURE:
            record, remaining = parse_timesync(remaining)
            current.timesync.append(record)
        else:
            if current.signature != 0:
                _merge_boot(boots, current)
            current, remaining = parse_timesync_boot(remaining)

    _merge_boot(boots, current)
    return boots


def get_timestamp(
    timesync_data: dict[str, TimesyncBoot],
    boot_uuid: str,
    firehose_log_delta_time: int,
    firehose_preamble_time: int,
) -> float:
    """Return the Unix epoch time in nanoseconds of a firehose log entry.

    The latest timesync record of the boot whose kernel time does not exceed the
    entry's continuous time gives the base; a preamble time of zero starts from the
    boot time instead.
    """
    continuous_base = 0
    walltime = 0
    adjustment = 1.0

    boot = timesync_data.get(boot_uuid)
    if boot is not None:
        if (boot.timebase_numerator, boot.timebase_denominator) == _ARM_TIMEBASE:
            adjustment = 125.0 / 3.0

        if firehose_preamble_time == 0:
            continuous_base = 0
            walltime = boot.boot_time

        for record in boot.timesync:
            if record.kernel_time > firehose_log_delta_time:
                if continuous_base == 0 and walltime == 0:
                    continuous_base = record.kernel_time
                    walltime = record.walltime
                break
            continuous_base = record.kernel_time
            walltime = record.walltime

    # delta * adjustment + (-(base) * adjustment), rounded once as a fused multiply-add
    offset = -float(continuous_base) * adjustment
    continuous = float(
        Fraction(float(firehose_log_delta_time)) * Fraction(adjustment) + Fraction(offset)
    )
    return continuous + float(walltime)