"""
Builders for hand-crafted ZIP records, used to feed the dumper with exactly the layouts the tests need.
"""

import struct

from atmfjstc.lib.zip_dump.output import LABEL_WIDTH


def local_header(
    name: bytes = b'a.txt', data: bytes = b'hello', extra: bytes = b'', flags: int = 0, method: int = 0,
    compressed_size=None, uncompressed_size=None, crc: int = 0x3610a686, mod_time: int = 0, mod_date: int = 0x21,
) -> bytes:
    compressed_size = len(data) if compressed_size is None else compressed_size
    uncompressed_size = len(data) if uncompressed_size is None else uncompressed_size

    return struct.pack(
        '<IHHHHHIIIHH',
        0x04034b50, 20, flags, method, mod_time, mod_date, crc, compressed_size, uncompressed_size,
        len(name), len(extra),
    ) + name + extra


def data_descriptor(crc: int = 0x3610a686, size: int = 5, signed: bool = False) -> bytes:
    return (struct.pack('<I', 0x08074b50) if signed else b'') + struct.pack('<III', crc, size, size)


def central_header(
    name: bytes = b'a.txt', extra: bytes = b'', comment: bytes = b'', flags: int = 0, method: int = 0,
    size: int = 5, local_offset: int = 0, version_made_by: int = 0x031e, external_attributes: int = 0x81a40000,
) -> bytes:
    return struct.pack(
        '<IHHHHHHIIIHHHHHII',
        0x02014b50, version_made_by, 20, flags, method, 0, 0x21, 0x3610a686, size, size,
        len(name), len(extra), len(comment), 0, 0, external_attributes, local_offset,
    ) + name + extra + comment


def end_of_central_dir(n_entries: int = 1, cd_size: int = 51, cd_offset: int = 40, comment: bytes = b'') -> bytes:
    return struct.pack(
        '<IHHHHIIH', 0x06054b50, 0, 0, n_entries, n_entries, cd_size, cd_offset, len(comment)
    ) + comment


def zip64_end_of_central_dir(record_size: int = 44, sector: bytes = b'') -> bytes:
    return struct.pack('<IQHHIIQQQQ', 0x06064b50, record_size, 0x032d, 45, 0, 0, 1, 1, 51, 40) + sector


def extra_chunk(tag: int, payload: bytes, declared_size=None) -> bytes:
    return struct.pack('<HH', tag, len(payload) if declared_size is None else declared_size) + payload


def minimal_archive() -> bytes:
    """A one-entry archive containing ``a.txt`` with the (stored) contents ``hello``."""
    local = local_header()
    central = central_header()

    return local + b'hello' + central + end_of_central_dir(cd_size=len(central), cd_offset=len(local) + 5)


def field_line(label: str, value: str) -> str:
    return f"{label:>{LABEL_WIDTH}} : {value}"


def note_line(text: str) -> str:
    return f"{'':{LABEL_WIDTH}} * {text}"


def section_titles(transcript: str):
    return [
        line[1:line.index(']')]
        for line in transcript.splitlines()
        if line.startswith('[') and not line.startswith('[-')
    ]
