"""
The top-level loop of a dump pass.

The walker does not rely on the central directory or on any declared offsets. It scans forward for the ``PK`` anchor,
decodes whatever record it finds there, and repeats. Anything between records is reported as unknown data, so that
every byte of the input is accounted for.
"""

from logging import getLogger
from typing import Optional

from atmfjstc.lib.zip_dump.context import DumpContext
from atmfjstc.lib.zip_dump.enums import RECORD_ANCHOR, RecordSignature
from atmfjstc.lib.zip_dump.errors import TruncatedFieldError
from atmfjstc.lib.zip_dump.hexdump import skip_unknown_data
from atmfjstc.lib.zip_dump.reading import find, maybe_read_int
from atmfjstc.lib.zip_dump.records import RECORD_DECODERS


_log = getLogger(__name__)

UNKNOWN_RECORD_TITLE = "!! Unknown record"


def walk_zip_records(ctx: DumpContext):
    """
    Dumps all the records from the current position of the reader up to the end of the data.
    """
    n_local_headers = 0
    n_central_headers = 0

    reader = ctx.reader

    while True:
        anchor_pos = find(reader, RECORD_ANCHOR)

        gap = (reader.total_size() if anchor_pos is None else anchor_pos) - reader.tell()
        if gap > 0:
            _log.debug("Resyncing over %d bytes at position %d", gap, reader.tell())
            skip_unknown_data(ctx, gap)

        if anchor_pos is None:
            break

        signature = maybe_read_int(reader, 4, 'header signature')
        if signature is None:
            ctx.writer.truncation('header signature')
            break

        if signature == RecordSignature.LOCAL_FILE_HEADER:
            n_local_headers += 1
        elif signature == RecordSignature.CENTRAL_FILE_HEADER:
            n_central_headers += 1

        seq_no = _sequence_number(signature, n_local_headers, n_central_headers)

        try:
            title, decoder = RECORD_DECODERS[RecordSignature(signature)]
        except ValueError:
            _log.debug("Unknown signature 0x%08x at position %d", signature, anchor_pos)
            ctx.writer.record_header(UNKNOWN_RECORD_TITLE, signature, anchor_pos)
            continue

        _log.debug("%s at position %d", title, anchor_pos)
        ctx.writer.record_header(title, signature, anchor_pos, seq_no)

        try:
            decoder(ctx, seq_no)
        except TruncatedFieldError as e:
            _log.debug("%s", e)
            ctx.writer.truncation(e.label)


def _sequence_number(signature: int, n_local_headers: int, n_central_headers: int) -> Optional[int]:
    if signature in (RecordSignature.LOCAL_FILE_HEADER, RecordSignature.DATA_DESCRIPTOR):
        return n_local_headers
    if signature == RecordSignature.CENTRAL_FILE_HEADER:
        return n_central_headers

    return None
