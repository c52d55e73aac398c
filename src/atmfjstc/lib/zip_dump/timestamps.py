"""
Rendering of the three kinds of timestamps found in ZIP files (MS-DOS date/time pairs, NTFS file times and UNIX times)
as ISO timestamps.

The dumper shows whatever value is stored, so unlike the plain converters these return None for values that cannot be
represented (e.g. an invalid DOS date, or an NTFS time past the year 9999).
"""

from datetime import datetime
from typing import Optional

from atmfjstc.lib.iso_timestamp import ISOTimestamp, iso_from_datetime, iso_from_unix_time
from atmfjstc.lib.os_forensics.windows import iso_from_ntfs_time


def iso_from_dos_datetime(dos_date: int, dos_time: int) -> Optional[ISOTimestamp]:
    """
    Converts from the MS-DOS date and time words used by the ZIP local and central headers.

    DOS times are in the (unknown) local time of the archiver, so the result is naive. The seconds are stored with a
    resolution of 2 seconds.
    """
    try:
        py_datetime = datetime(
            1980 + (dos_date >> 9),
            (dos_date >> 5) & 0xf,
            dos_date & 0x1f,
            dos_time >> 11,
            (dos_time >> 5) & 0x3f,
            (dos_time & 0x1f) * 2,
        )
    except ValueError:
        return None

    return iso_from_datetime(py_datetime)


def maybe_iso_from_unix_time(unix_time: int) -> Optional[ISOTimestamp]:
    try:
        return iso_from_unix_time(unix_time)
    except OverflowError:
        return None


def maybe_iso_from_ntfs_time(ntfs_time: int) -> Optional[ISOTimestamp]:
    try:
        return iso_from_ntfs_time(ntfs_time)
    except OverflowError:
        return None
