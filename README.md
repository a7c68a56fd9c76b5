# unifiedlog

A pure-Python library for decoding on-disk structures of the macOS Unified
Log. It uses no Apple APIs and has no dependencies outside the standard
library, so it works on any platform against bytes you have read from a live
system's log directories or from a copied `.logarchive`.

## Modules

- `unifiedlog.preamble`: the 16-byte preamble that starts every tracev3
  chunk. `parse_preamble(data)` returns a `LogPreamble` (`chunk_tag`,
  `chunk_sub_tag`, `chunk_data_size`) and the bytes that follow it;
  `detect_preamble(data)` returns only the preamble.
- `unifiedlog.header`: the tracev3 header chunk. `parse_header(data)` returns
  a `HeaderChunk` (mach timebase, continuous time, bias and DST, build
  version, hardware model, boot UUID, logd pid, timezone path) and the
  remaining bytes.
- `unifiedlog.timesync`: `.timesync` files.
  - `parse_timesync_data(data)` returns a dict of `TimesyncBoot` records keyed
    by boot UUID, each holding its list of `Timesync` records. Records for a
    boot UUID that appears more than once in the data are merged.
  - `parse_timesync_boot(data)` and `parse_timesync(data)` parse a single boot
    header or record and return it with the bytes that follow.
  - `get_timestamp(timesync_data, boot_uuid, firehose_log_delta_time,
    firehose_preamble_time)` converts a mach continuous time to Unix epoch
    nanoseconds (as a float), applying the 125/3 timebase when a boot
    records it (Apple Silicon).
- `unifiedlog.printf`: rendering of one value for a printf conversion type:
  `format_alignment_left`, `format_alignment_right`,
  `format_alignment_left_space`, `format_alignment_right_space`,
  `format_left`, `format_right`, and `parse_float` (reads a logged 64-bit
  integer as the bits of a double) and `parse_int`. Values that cannot be
  parsed become `0` with a logged warning.
- `unifiedlog.formatter`: `FirehoseItemInfo` (one logged value:
  `message_strings`, `item_type`, `item_size`) and
  `parse_formatter(formatter, items, item_type, item_index)`, which renders
  one item for a single format specification such as `%+04d`, `%#x`,
  `%.2@` or `%*s`.
- `unifiedlog.message`:
  `format_firehose_log_message(format_string, items, pattern=None)` builds the
  full message, substituting `<private>` for redacted values and
  `<Missing message data>` where values run out. `pattern` defaults to
  `MESSAGE_PATTERN`. `parse_type_formatter` handles formatters with a type
  annotation such as `%{public}s` and appends signpost annotations;
  `parse_signpost_format` extracts them.

Truncated or malformed data raises `unifiedlog.errors.ParseError`, a
subclass of `ValueError`.

## Installation

```
pip install .
```

## Examples

Reading a timesync file and dating a log entry:

```python
from pathlib import Path

from unifiedlog.timesync import get_timestamp, parse_timesync_data

boots = parse_timesync_data(Path("0000000000000002.timesync").read_bytes())
for uuid, boot in boots.items():
    print(uuid, boot.boot_time, len(boot.timesync))

uuid = next(iter(boots))
print(get_timestamp(boots, uuid, 2818326118, 1))
```

Formatting a message:

```python
from unifiedlog.formatter import FirehoseItemInfo
from unifiedlog.message import format_firehose_log_message

items = [FirehoseItemInfo(message_strings="796.100", item_type=34, item_size=0)]
print(format_firehose_log_message("opendirectoryd (build %{public}s) launched...", items))
# opendirectoryd (build 796.100) launched...
```

## What it does not do

- It does not find log files. You supply the bytes; there is no walking of
  `/private/var/db/diagnostics`, `/private/var/db/uuidtext` or a logarchive
  directory.
- It decodes only the chunk preamble and header of a tracev3 file. It does not
  decode catalog, chunkset or firehose chunks, uuidtext string files or
  shared cache (dsc) string files, so it cannot by itself produce finished log
  entries from a tracev3 file.
- Formatters for Apple object types (for example `%{bool}d` or `%{uuid_t}`)
  are rendered as ordinary printf values, not decoded.
- There is no command-line tool.

## Running the tests

```
pip install .[test]
pytest
```