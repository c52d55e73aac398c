"""
Hex/ASCII rendering of raw byte ranges, and the related "skip" and "text" renderings.

All functions here consume exactly the requested number of bytes from the reader, or as many as there are left if the
data ends first.
"""

from typing import Iterable, Iterator, Optional

from atmfjstc.lib.binary_utils.BinaryReader import BinaryReader
from atmfjstc.lib.zip_dump.context import DumpContext
from atmfjstc.lib.zip_dump.reading import skip_at_most


ROW_SIZE = 16

OMITTED_ROWS_MARKER = ' *'


def format_hex_dump_row(offset: int, row: bytes) -> str:
    hex_part = ''.join(f"{byte:02X}{'-' if index == 7 else ' '}" for index, byte in enumerate(row))
    ascii_part = ''.join(chr(byte) if 0x20 <= byte < 0x7f else '.' for byte in row)

    return f"+{offset:08X} : {hex_part:<{ROW_SIZE * 3}}:{ascii_part:<{ROW_SIZE}}"


def iter_hex_dump_lines(rows: Iterable[bytes], omit_repeated_rows: bool = False) -> Iterator[str]:
    """
    Renders a sequence of data rows (normally 16 bytes each, the last one possibly shorter) as hex dump lines.

    If `omit_repeated_rows` is True, a run of full rows identical to the one before them is replaced by a single
    marker line.
    """
    offset = 0
    previous = None
    in_repeat_run = False

    for row in rows:
        if omit_repeated_rows and (len(row) == ROW_SIZE) and (row == previous):
            if not in_repeat_run:
                yield OMITTED_ROWS_MARKER
                in_repeat_run = True
        else:
            in_repeat_run = False
            yield format_hex_dump_row(offset, row)

        previous = row
        offset += len(row)


def iter_rows(reader: BinaryReader, length: int) -> Iterator[bytes]:
    remaining = length

    while remaining > 0:
        row = reader.read_at_most(min(ROW_SIZE, remaining))
        if len(row) == 0:
            break

        yield row
        remaining -= len(row)


def dump_bytes(ctx: DumpContext, length: int):
    for line in iter_hex_dump_lines(iter_rows(ctx.reader, length), ctx.config.omit_repeated_rows):
        ctx.writer.line(line)


def dump_or_skip(ctx: DumpContext, caption: str, length: int):
    """
    Dumps a payload region in full-dump mode, or just skips over it (with a summary line) otherwise.
    """
    if ctx.config.full_dump:
        dump_bytes(ctx, length)
        return

    skip_at_most(ctx.reader, length)

    if not ctx.config.quiet:
        ctx.writer.line(f"; skip {caption} ({length} bytes), enable full dump to see the data")


def skip_unknown_data(ctx: DumpContext, length: int, what: Optional[str] = None):
    """
    Reports a span of data that could not be interpreted, and consumes it (dumping it in full-dump mode).
    """
    ctx.writer.problem(f"Skip unknown {what + ' ' if what else ''}data {length}(0x{length:X}) bytes")

    if ctx.config.full_dump:
        dump_bytes(ctx, length)
    else:
        skip_at_most(ctx.reader, length)


def escape_text(raw: bytes) -> str:
    """
    Renders a file name or comment: control characters are shown in caret notation (e.g. ``^J``), and the rest is
    decoded as UTF-8, with any undecodable bytes shown as escapes.
    """
    escaped = bytearray()

    for byte in raw:
        if byte < 0x20:
            escaped += b'^' + bytes([byte + 0x40])
        elif byte == 0x7f:
            escaped += b'^?'
        else:
            escaped.append(byte)

    return escaped.decode('utf-8', errors='backslashreplace')


def dump_string(ctx: DumpContext, length: int):
    ctx.writer.line(escape_text(ctx.reader.read_at_most(length)))
