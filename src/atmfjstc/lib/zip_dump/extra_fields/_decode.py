from logging import getLogger
from typing import Callable, Dict, Optional, Tuple

from atmfjstc.lib.zip_dump.context import DumpContext
from atmfjstc.lib.zip_dump.enums import ExtraFieldTag, describe_compression_method
from atmfjstc.lib.zip_dump.errors import TruncatedFieldError
from atmfjstc.lib.zip_dump.hexdump import dump_bytes, dump_or_skip, skip_unknown_data, escape_text
from atmfjstc.lib.zip_dump.output import FieldFormat
from atmfjstc.lib.zip_dump.reading import open_zip_reader, at_end, peek
from atmfjstc.lib.zip_dump.timestamps import maybe_iso_from_ntfs_time, maybe_iso_from_unix_time

from . import EXTRA_FIELD_TITLES, UNKNOWN_EXTRA_FIELD_TITLE


_log = getLogger(__name__)

ChunkDecoder = Callable[[DumpContext], None]

NTFS_FILE_TIMES_TAG = 0x0001


def dump_extra_field_area(ctx: DumpContext, length: int):
    data = ctx.reader.read_at_most(length)
    area = ctx.with_reader(open_zip_reader(data))

    _dump_tlv_sequence(area, _lookup_extra_field_decoder)

    leftover = area.reader.bytes_remaining()
    if leftover > 0:
        skip_unknown_data(area, leftover)

    if len(data) < length:
        raise TruncatedFieldError('end of extra field', ctx.reader.tell())


def _lookup_extra_field_decoder(tag: int) -> Tuple[str, Optional[ChunkDecoder]]:
    decoder = _DECODERS_BY_TAG.get(tag)
    if decoder is None:
        return UNKNOWN_EXTRA_FIELD_TITLE, None

    return EXTRA_FIELD_TITLES[tag], decoder


def _dump_tlv_sequence(ctx: DumpContext, lookup: Callable[[int], Tuple[str, Optional[ChunkDecoder]]]):
    """
    Dumps tag(2)/length(2)/value chunks for as long as a complete chunk header is available. Each value is decoded in
    isolation, so a decoder can never read past the length declared for its chunk.
    """
    while ctx.reader.bytes_remaining() >= 4:
        tag = ctx.reader.read_fixed_size_int(2, 'extra tag')
        length = ctx.reader.read_fixed_size_int(2, 'extra size')

        title, decoder = lookup(tag)
        ctx.writer.extra_header(title, tag, length)

        available = ctx.reader.bytes_remaining()
        if length > available:
            _log.debug("Extra chunk 0x%04x declares %d bytes, only %d available", tag, length, available)
            ctx.writer.problem(f"Extra field chunk overruns its area by {length - available} bytes")

        _dump_chunk_value(ctx.with_reader(open_zip_reader(ctx.reader.read_at_most(length))), decoder)


def _dump_chunk_value(chunk: DumpContext, decoder: Optional[ChunkDecoder]):
    if decoder is None:
        dump_bytes(chunk, chunk.reader.bytes_remaining())
        return

    try:
        decoder(chunk)
    except TruncatedFieldError as e:
        chunk.writer.truncation(e.label)

    trailing = chunk.reader.bytes_remaining()
    if trailing > 0:
        skip_unknown_data(chunk, trailing, 'trailing')


def _dump_zip64(chunk: DumpContext):
    # The fields only appear if the corresponding field in the local/central record is set to the sentinel value, so
    # any of them may be missing. Their order is fixed, though.
    for label, n_bytes, field_format in (
        ("Original Size", 8, FieldFormat.DEC_HEX),
        ("Compressed Size", 8, FieldFormat.DEC_HEX),
        ("Relative Header Offset", 8, FieldFormat.DEC_HEX),
        ("Disk Start Number", 4, FieldFormat.DEC),
    ):
        if chunk.reader.bytes_remaining() >= n_bytes:
            chunk.field(label, n_bytes, field_format)


def _dump_os2_extended_attributes(chunk: DumpContext):
    chunk.field("uncompressed EA data size", 4, FieldFormat.DEC_HEX)

    # The central header version stops here
    if at_end(chunk.reader):
        return

    chunk.field("compression type", 2, FieldFormat.DEC, _compression_notes)
    chunk.field("CRC", 4, FieldFormat.HEX)

    if not at_end(chunk.reader):
        chunk.writer.line("compressed EA data:")
        dump_or_skip(chunk, "compressed EA data", chunk.reader.bytes_remaining())


def _dump_ntfs(chunk: DumpContext):
    chunk.field("reserved", 4, FieldFormat.HEX)

    _dump_tlv_sequence(chunk, _lookup_ntfs_attribute_decoder)


def _lookup_ntfs_attribute_decoder(tag: int) -> Tuple[str, Optional[ChunkDecoder]]:
    if tag == NTFS_FILE_TIMES_TAG:
        return "NTFS file time", _dump_ntfs_file_times

    return "!! Unknown NTFS attribute", None


def _dump_ntfs_file_times(attribute: DumpContext):
    for label in ("last mod time", "last access time", "last creation time"):
        attribute.field(label, 8, FieldFormat.HEX, _ntfs_time_notes)


def _dump_nt_security_descriptor(chunk: DumpContext):
    chunk.field("uncompressed SD data size", 4, FieldFormat.DEC_HEX)

    # The central header version stops here
    if at_end(chunk.reader):
        return

    chunk.field("version", 1, FieldFormat.DEC)
    chunk.field("compression type", 2, FieldFormat.DEC, _compression_notes)
    chunk.field("crc", 4, FieldFormat.HEX)

    if not at_end(chunk.reader):
        chunk.writer.line("compressed SD data:")
        dump_or_skip(chunk, "compressed SD data", chunk.reader.bytes_remaining())


def _dump_extended_timestamp(chunk: DumpContext):
    flags = chunk.field("Flags", 1, FieldFormat.HEX)

    # The central version of this header only has the mtime, but keeps the flags from the local one. Hence a time is
    # only read if its flag is set *and* there is still data left.
    for bit, label in ((0, "last mod time"), (1, "last access time"), (2, "last create time")):
        if (flags & (1 << bit)) and not at_end(chunk.reader):
            chunk.field(label, 4, FieldFormat.HEX, _unix_time_notes)


def _dump_infozip_unicode_comment(chunk: DumpContext):
    _dump_infozip_unicode_data(chunk, "entry comment encoded UTF-8:")


def _dump_infozip_unicode_path(chunk: DumpContext):
    _dump_infozip_unicode_data(chunk, "file name encoded UTF-8:")


def _dump_infozip_unicode_data(chunk: DumpContext, caption: str):
    version = chunk.field("version", 1, FieldFormat.DEC)
    chunk.field("crc", 4, FieldFormat.HEX)

    if at_end(chunk.reader):
        return

    payload = peek(chunk.reader, chunk.reader.bytes_remaining())

    chunk.writer.line(caption)
    dump_bytes(chunk, len(payload))

    if version == 1:
        chunk.maybe_note(f'"{escape_text(payload)}"')


def _compression_notes(method: int):
    return [describe_compression_method(method)]


def _ntfs_time_notes(ntfs_time: int):
    return [maybe_iso_from_ntfs_time(ntfs_time) or "(out of range)"]


def _unix_time_notes(unix_time: int):
    return [maybe_iso_from_unix_time(unix_time) or "(out of range)"]


_DECODERS_BY_TAG: Dict[int, ChunkDecoder] = {
    ExtraFieldTag.ZIP64: _dump_zip64,
    ExtraFieldTag.OS2_EXTENDED_ATTRIBUTES: _dump_os2_extended_attributes,
    ExtraFieldTag.NTFS: _dump_ntfs,
    ExtraFieldTag.NT_SECURITY_DESCRIPTOR: _dump_nt_security_descriptor,
    ExtraFieldTag.EXTENDED_TIMESTAMP: _dump_extended_timestamp,
    ExtraFieldTag.INFOZIP_UNICODE_COMMENT: _dump_infozip_unicode_comment,
    ExtraFieldTag.INFOZIP_UNICODE_PATH: _dump_infozip_unicode_path,
}
