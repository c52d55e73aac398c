"""
Decoders for the top-level ZIP records.

Each decoder is called right after the record's 4-byte signature has been read and printed. It reads the fixed fields
in the order laid down by PKWARE's APPNOTE.TXT, then dumps the variable-length tails whose lengths were
given by those fields.

If the data ends in the middle of a record, the decoder raises `TruncatedFieldError` and leaves the cursor wherever
the data ended.
"""

from typing import Callable, Dict, List, Optional, Tuple

from atmfjstc.lib.zip_dump.context import DumpContext, NotesFunc
from atmfjstc.lib.zip_dump.enums import RecordSignature, ZipEntryFlags, SENTINEL_16, SENTINEL_32, \
    describe_version, describe_compression_method, describe_general_purpose_flags, describe_internal_attributes, \
    describe_external_attributes
from atmfjstc.lib.zip_dump.extra_fields import dump_extra_field
from atmfjstc.lib.zip_dump.hexdump import dump_bytes, dump_or_skip, dump_string
from atmfjstc.lib.zip_dump.output import FieldFormat
from atmfjstc.lib.zip_dump.reading import peek
from atmfjstc.lib.zip_dump.timestamps import iso_from_dos_datetime


RecordDecoder = Callable[[DumpContext, Optional[int]], None]

ZIP64_END_RECORD_FIXED_SIZE = 2 * 2 + 4 * 2 + 8 * 4
"""Size of the fixed fields in the Zip64 end of central directory record that follow the "size of record" field"""


def dump_local_file_header(ctx: DumpContext, seq_no: Optional[int]):
    ctx.field("version needed to extract", 2, FieldFormat.HEX, describe_version)
    flags = ctx.field("general purpose bit flag", 2, FieldFormat.HEX)
    _dump_method_and_times(ctx, flags)
    ctx.field("crc-32", 4, FieldFormat.HEX)
    compressed_size = ctx.field("compressed size", 4, FieldFormat.DEC_HEX, _sentinel_notes(SENTINEL_32))
    ctx.field("uncompressed size", 4, FieldFormat.DEC_HEX, _sentinel_notes(SENTINEL_32))
    file_name_length = ctx.field("file name length", 2, FieldFormat.DEC_HEX)
    extra_field_length = ctx.field("extra field length", 2, FieldFormat.DEC_HEX)

    if file_name_length > 0:
        ctx.writer.section("Local file name", ctx.reader.tell(), seq_no)
        dump_string(ctx, file_name_length)

    if extra_field_length > 0:
        ctx.writer.section("Local extra field", ctx.reader.tell(), seq_no)
        dump_extra_field(ctx, extra_field_length)

    # The real size is in the Zip64 extra field, so we cannot know where the file data ends. We leave it to the walker
    # to find the next record.
    if compressed_size == SENTINEL_32:
        if not ctx.config.quiet:
            ctx.writer.line("; file data size is in the Zip64 extra field, file data and data descriptor not dumped")
        return

    if compressed_size > 0:
        ctx.writer.section("File data", ctx.reader.tell(), seq_no)
        dump_or_skip(ctx, "file data", compressed_size)

    if flags & ZipEntryFlags.DEFERRED_CRC32:
        # Info-ZIP precedes the descriptor with a signature, in which case the walker will pick it up as a record
        if peek(ctx.reader, 4) == RecordSignature.DATA_DESCRIPTOR.to_bytes(4, 'little'):
            return

        ctx.writer.section("Data descriptor", ctx.reader.tell(), seq_no)
        dump_data_descriptor(ctx, seq_no)


def dump_data_descriptor(ctx: DumpContext, _seq_no: Optional[int]):
    ctx.field("crc-32", 4, FieldFormat.HEX)
    ctx.field("compressed size", 4, FieldFormat.DEC_HEX)
    ctx.field("uncompressed size", 4, FieldFormat.DEC_HEX)


def dump_archive_extra_data_record(ctx: DumpContext, _seq_no: Optional[int]):
    extra_field_length = ctx.field("extra field length", 4, FieldFormat.DEC_HEX)

    if extra_field_length > 0:
        ctx.writer.section("Archive extra field", ctx.reader.tell())
        dump_extra_field(ctx, extra_field_length)


def dump_central_file_header(ctx: DumpContext, seq_no: Optional[int]):
    version_made_by = ctx.field("version made by", 2, FieldFormat.HEX, describe_version)
    ctx.field("version needed to extract", 2, FieldFormat.HEX, describe_version)
    flags = ctx.field("general purpose bit flag", 2, FieldFormat.HEX)
    _dump_method_and_times(ctx, flags)
    ctx.field("crc-32", 4, FieldFormat.HEX)
    ctx.field("compressed size", 4, FieldFormat.DEC_HEX, _sentinel_notes(SENTINEL_32))
    ctx.field("uncompressed size", 4, FieldFormat.DEC_HEX, _sentinel_notes(SENTINEL_32))
    file_name_length = ctx.field("file name length", 2, FieldFormat.DEC_HEX)
    extra_field_length = ctx.field("extra field length", 2, FieldFormat.DEC_HEX)
    file_comment_length = ctx.field("file comment length", 2, FieldFormat.DEC_HEX)
    ctx.field("disk number start", 2, FieldFormat.DEC_UNLESS_SENTINEL, _sentinel_notes(SENTINEL_16))
    ctx.field("internal file attributes", 2, FieldFormat.HEX, describe_internal_attributes)
    ctx.field(
        "external file attributes", 4, FieldFormat.HEX,
        lambda attributes: describe_external_attributes(attributes, version_made_by)
    )
    ctx.field("relative offset of local header", 4, FieldFormat.DEC_HEX, _sentinel_notes(SENTINEL_32))

    if file_name_length > 0:
        ctx.writer.section("Central file name", ctx.reader.tell(), seq_no)
        dump_string(ctx, file_name_length)

    if extra_field_length > 0:
        ctx.writer.section("Central extra field", ctx.reader.tell(), seq_no)
        dump_extra_field(ctx, extra_field_length)

    if file_comment_length > 0:
        ctx.writer.section("Central file comment", ctx.reader.tell(), seq_no)
        dump_string(ctx, file_comment_length)


def dump_digital_signature(ctx: DumpContext, _seq_no: Optional[int]):
    size = ctx.field("size of data", 2, FieldFormat.DEC_HEX)

    if size > 0:
        ctx.writer.section("Signature data", ctx.reader.tell())
        dump_bytes(ctx, size)


def dump_zip64_end_of_central_dir(ctx: DumpContext, _seq_no: Optional[int]):
    record_size = ctx.field("size of this record", 8, FieldFormat.DEC_HEX)
    ctx.field("version made by", 2, FieldFormat.HEX, describe_version)
    ctx.field("version needed to extract", 2, FieldFormat.HEX, describe_version)
    ctx.field("number of this disk", 4, FieldFormat.DEC)
    ctx.field("disk of starting directory", 4, FieldFormat.DEC)
    ctx.field("directory-entries on this disk", 8, FieldFormat.DEC)
    ctx.field("directory-entries in all disks", 8, FieldFormat.DEC)
    ctx.field("size of the directory", 8, FieldFormat.DEC_HEX)
    ctx.field("offset of starting directory", 8, FieldFormat.DEC_HEX)

    sector_length = record_size - ZIP64_END_RECORD_FIXED_SIZE
    if sector_length < 0:
        ctx.writer.problem(
            f"Record size is {-sector_length} bytes short of the {ZIP64_END_RECORD_FIXED_SIZE} bytes of fixed fields"
        )
        return

    # The sector consists of ID(2)/size(4) blocks, but we don't decode it any further
    if sector_length > 0:
        ctx.writer.section("Zip64 extensible data sector", ctx.reader.tell())
        dump_bytes(ctx, sector_length)


def dump_zip64_end_of_central_dir_locator(ctx: DumpContext, _seq_no: Optional[int]):
    ctx.field("disk of starting directory", 4, FieldFormat.DEC)
    ctx.field("relative offset of zip64 record", 8, FieldFormat.DEC_HEX)
    ctx.field("total number of disks", 4, FieldFormat.DEC)


def dump_end_of_central_dir(ctx: DumpContext, _seq_no: Optional[int]):
    ctx.field("number of this disk", 2, FieldFormat.DEC_UNLESS_SENTINEL, _sentinel_notes(SENTINEL_16))
    ctx.field("disk of starting directory", 2, FieldFormat.DEC_UNLESS_SENTINEL, _sentinel_notes(SENTINEL_16))
    ctx.field("directory-entries on this disk", 2, FieldFormat.DEC_UNLESS_SENTINEL, _sentinel_notes(SENTINEL_16))
    ctx.field("directory-entries in all disks", 2, FieldFormat.DEC_UNLESS_SENTINEL, _sentinel_notes(SENTINEL_16))
    ctx.field("size of the directory", 4, FieldFormat.DEC_HEX, _sentinel_notes(SENTINEL_32))
    ctx.field("offset of starting directory", 4, FieldFormat.DEC_HEX, _sentinel_notes(SENTINEL_32))
    comment_length = ctx.field(".ZIP file comment length", 2, FieldFormat.DEC_HEX)

    if comment_length > 0:
        ctx.writer.section(".ZIP file comment", ctx.reader.tell())
        dump_string(ctx, comment_length)


def _dump_method_and_times(ctx: DumpContext, flags: int):
    ctx.field(
        "compression method", 2, FieldFormat.HEX,
        lambda method: [describe_compression_method(method), *describe_general_purpose_flags(flags, method)]
    )
    mod_time = ctx.field("last mod file time", 2, FieldFormat.HEX)
    ctx.field("last mod file date", 2, FieldFormat.HEX, lambda mod_date: _dos_datetime_notes(mod_date, mod_time))


def _dos_datetime_notes(dos_date: int, dos_time: int) -> List[str]:
    return [iso_from_dos_datetime(dos_date, dos_time) or "invalid DOS date/time"]


def _sentinel_notes(sentinel: int) -> NotesFunc:
    return lambda value: ["value is stored in the Zip64 extra field"] if value == sentinel else []


RECORD_DECODERS: Dict[RecordSignature, Tuple[str, RecordDecoder]] = {
    RecordSignature.LOCAL_FILE_HEADER: ("Local file header", dump_local_file_header),
    RecordSignature.DATA_DESCRIPTOR: ("Data descriptor header", dump_data_descriptor),
    RecordSignature.ARCHIVE_EXTRA_DATA: ("Archive extra data record", dump_archive_extra_data_record),
    RecordSignature.CENTRAL_FILE_HEADER: ("Central file header", dump_central_file_header),
    RecordSignature.DIGITAL_SIGNATURE: ("Digital signature", dump_digital_signature),
    RecordSignature.ZIP64_END_OF_CENTRAL_DIR: (
        "Zip64 end of central directory record", dump_zip64_end_of_central_dir
    ),
    RecordSignature.ZIP64_END_OF_CENTRAL_DIR_LOCATOR: (
        "Zip64 end of central directory locator", dump_zip64_end_of_central_dir_locator
    ),
    RecordSignature.END_OF_CENTRAL_DIR: ("End of central directory record", dump_end_of_central_dir),
}
