"""
Helpers for the kind of reading a ZIP dumper does on top of a `BinaryReader`: ints that may be cut short by the end
of the data, forward searches for record signatures, and clamped skips.

The dumper never trusts declared lengths, so none of these raise when the data ends early. Rather, they consume
whatever is there and let the caller report the truncation.
"""

from os import SEEK_CUR, SEEK_SET
from typing import BinaryIO, Optional, Union

from atmfjstc.lib.binary_utils.BinaryReader import BinaryReader, BinaryReaderMissingDataError, \
    BinaryReaderReadPastEndError


def open_zip_reader(data_or_fileobj: Union[bytes, BinaryIO]) -> BinaryReader:
    reader = BinaryReader(data_or_fileobj, big_endian=False)

    if not reader.seekable():
        raise ValueError("The ZIP dumper needs a seekable input stream")

    return reader


def maybe_read_int(reader: BinaryReader, n_bytes: int, meaning: Optional[str] = None) -> Optional[int]:
    """
    Reads a little-endian unsigned int, or returns None if the data ends before the int is complete.

    The bytes of an incomplete int are still consumed, so the position always reflects what was actually read.
    """
    try:
        return reader.read_fixed_size_int(n_bytes, meaning)
    except (BinaryReaderMissingDataError, BinaryReaderReadPastEndError):
        return None


def at_end(reader: BinaryReader) -> bool:
    return reader.bytes_remaining() == 0


def skip_at_most(reader: BinaryReader, n_bytes: int) -> int:
    """
    Skips `n_bytes`, or up to the end of the data if fewer remain. Returns the number of bytes actually skipped.
    """
    if n_bytes < 0:
        raise ValueError("Number of bytes to skip must be non-negative")

    n_bytes = min(n_bytes, reader.bytes_remaining())
    reader.seek(n_bytes, SEEK_CUR)

    return n_bytes


def peek(reader: BinaryReader, n_bytes: int) -> bytes:
    original_pos = reader.tell()

    data = reader.read_at_most(n_bytes)
    reader.seek(original_pos, SEEK_SET)

    return data


def find(reader: BinaryReader, needle: bytes, buffer_size: int = 65536) -> Optional[int]:
    """
    Searches forward for a byte sequence, without advancing the position.

    Args:
        reader: The reader to search in. The search starts at its current position.
        needle: The sequence to look for. Must not be empty.
        buffer_size: The size of the blocks the data is read in while searching.

    Returns:
        The absolute position of the first occurrence of `needle`, or None if it does not occur before the end of the
        data.
    """
    if len(needle) == 0:
        raise ValueError("Cannot search for an empty sequence")

    original_pos = reader.tell()
    carry = b''

    try:
        while True:
            block = reader.read_at_most(max(buffer_size, len(needle)))
            if len(block) == 0:
                return None

            data = carry + block
            found_at = data.find(needle)
            if found_at != -1:
                return reader.tell() - len(data) + found_at

            # A match may straddle two blocks
            carry = data[-(len(needle) - 1):] if len(needle) > 1 else b''
    finally:
        reader.seek(original_pos, SEEK_SET)
