"""
Enums and lookup tables for the values found in ZIP records, along with the human-readable notes the dumper prints
next to them.
"""

from enum import IntEnum, IntFlag
from typing import Dict, List

from atmfjstc.lib.archive_forensics.zip import ZipEntryFlags, ZipInternalFileAttributes, ZipHostOS, \
    ZipCompressionMethod, is_windows_compatible_zip_os, is_posix_compatible_zip_os


RECORD_ANCHOR = b'PK'
"""The two bytes every ZIP record signature starts with"""

SENTINEL_16 = 0xffff
SENTINEL_32 = 0xffffffff


class RecordSignature(IntEnum):
    LOCAL_FILE_HEADER = 0x04034b50
    DATA_DESCRIPTOR = 0x08074b50
    ARCHIVE_EXTRA_DATA = 0x08064b50
    CENTRAL_FILE_HEADER = 0x02014b50
    DIGITAL_SIGNATURE = 0x05054b50
    ZIP64_END_OF_CENTRAL_DIR = 0x06064b50
    ZIP64_END_OF_CENTRAL_DIR_LOCATOR = 0x07064b50
    END_OF_CENTRAL_DIR = 0x06054b50


class ExtraFieldTag(IntEnum):
    ZIP64 = 0x0001
    OS2_EXTENDED_ATTRIBUTES = 0x0009
    NTFS = 0x000a
    NT_SECURITY_DESCRIPTOR = 0x4453
    EXTENDED_TIMESTAMP = 0x5455
    INFOZIP_UNICODE_COMMENT = 0x6375
    INFOZIP_UNICODE_PATH = 0x7075


RECORD_LENGTH_CONTROL_ATTRIBUTE = 1 << 1
"""Internal attribute bit (mainframe only) signalling that records are preceded by a 4-byte length field"""

AE_X_ENCRYPTION_MARKER = 99
"""Compression method stored by WinZip AES-encrypted entries; the real method is in the AES extra field"""

_HOST_OS_DESCRIPTIONS: Dict[int, str] = {
    ZipHostOS.FAT: "MS-DOS and OS/2 (FAT / VFAT / FAT32 file systems)",
    ZipHostOS.AMIGA: "Amiga",
    ZipHostOS.OPEN_VMS: "OpenVMS",
    ZipHostOS.UNIX: "UNIX",
    ZipHostOS.VM_CMS: "VM/CMS",
    ZipHostOS.ATARI_TOS: "Atari ST",
    ZipHostOS.HPFS: "OS/2 H.P.F.S.",
    ZipHostOS.MACINTOSH: "Macintosh",
    ZipHostOS.Z_SYSTEM: "Z-System",
    ZipHostOS.CPM: "CP/M",
    ZipHostOS.TOPS_20: "Windows NTFS or TOPS-20 (by Info-ZIP)",
    ZipHostOS.NTFS: "MVS (OS/390 - Z/OS) or NTFS (by Info-ZIP)",
    ZipHostOS.SMS_QDOS: "VSE or SMS/QDOS (by Info-ZIP)",
    ZipHostOS.RISC_OS: "Acorn Risc",
    ZipHostOS.VFAT: "VFAT",
    ZipHostOS.MVS: "alternate MVS",
    ZipHostOS.BEOS: "BeOS",
    ZipHostOS.TANDEM: "Tandem",
    ZipHostOS.THEOS: "OS/400",
    ZipHostOS.OSX: "OS/X (Darwin)",
    ZipHostOS.ATHEOS: "AtheOS/Syllable (by Info-ZIP)",
}


class DOSFileAttributes(IntFlag):
    READ_ONLY = 1 << 0
    HIDDEN = 1 << 1
    SYSTEM = 1 << 2
    VOLUME_LABEL = 1 << 3
    DIRECTORY = 1 << 4
    ARCHIVE = 1 << 5


def describe_version(version: int) -> List[str]:
    """
    Notes for a "version made by" / "version needed to extract" field: the host system in the upper byte, and the
    ZIP format version in the lower one.
    """
    host_os = (version >> 8) & 0xff
    zip_version = version & 0xff

    host_text = _HOST_OS_DESCRIPTIONS.get(host_os, "unused")

    return [f"{host_os} - {host_text}", f"ver {zip_version // 10}.{zip_version % 10}"]


def describe_compression_method(method: int) -> str:
    if method == AE_X_ENCRYPTION_MARKER:
        return f"method {method}: AE-x encryption marker"

    try:
        return f"method {method}: {ZipCompressionMethod(method).name}"
    except ValueError:
        return f"method {method}: unknown"


def describe_general_purpose_flags(flags: int, method: int) -> List[str]:
    """
    Notes for the general purpose bit flag. The meaning of bits 1 and 2 depends on the compression method.
    """
    notes = []

    if flags & ZipEntryFlags.ENCRYPTED:
        notes.append("Bit 0: encrypted")

    if method == ZipCompressionMethod.IMPLODE:
        if flags & (1 << 1):
            notes.append("Bit 1: Method 6: 8K sliding dictionary")
        if flags & (1 << 2):
            notes.append("Bit 2: Method 6: 3 Shannon-Fano trees")
    elif method in (ZipCompressionMethod.DEFLATE, ZipCompressionMethod.DEFLATE64):
        level_note = _DEFLATE_LEVEL_NOTES.get((flags >> 1) & 3)
        if level_note is not None:
            notes.append(f"Bit 1-2: Method 8/9: {level_note}")
    elif method == ZipCompressionMethod.LZMA:
        if flags & (1 << 1):
            notes.append("Bit 1: Method 14: end-of-stream marker used to mark the end of the compressed data")

    for bit in range(3, 16):
        if flags & (1 << bit):
            notes.append(f"Bit {bit}: {_FLAG_BIT_NOTES[bit]}")

    return notes


_DEFLATE_LEVEL_NOTES: Dict[int, str] = {
    1: "Maximum (-exx/-ex) compression",
    2: "Fast (-ef) compression",
    3: "Super Fast (-es) compression",
}


_FLAG_BIT_NOTES: Dict[int, str] = {
    3: "crc-32, compressed size and uncompressed size are set to zero (see data descriptor)",
    4: "Reserved for use with method 8, for enhanced deflating",
    5: "compressed patched data",
    6: "Strong encryption",
    7: "Currently unused",
    8: "Currently unused",
    9: "Currently unused",
    10: "Currently unused",
    11: "Language encoding flag (EFS): file name and comment are UTF-8",
    12: "Reserved by PKWARE for enhanced compression",
    13: "Local header values are masked (central directory encryption)",
    14: "Reserved by PKWARE",
    15: "Reserved by PKWARE",
}


def describe_internal_attributes(attributes: int) -> List[str]:
    notes = []

    if attributes & ZipInternalFileAttributes.LIKELY_TEXT_FILE:
        notes.append("text file")
    if attributes & RECORD_LENGTH_CONTROL_ATTRIBUTE:
        notes.append("records are preceded by a 4-byte length control field")

    return notes


def describe_external_attributes(attributes: int, version_made_by: int) -> List[str]:
    """
    The external attributes are host-dependent. We know how to read the DOS attribute byte (in the low byte) and the
    POSIX mode (in the high word).
    """
    host_os = (version_made_by >> 8) & 0xff

    # PKWARE records Windows NTFS archives under the TOPS-20 code
    if is_windows_compatible_zip_os(host_os) or (host_os == ZipHostOS.TOPS_20):
        dos_attrs = DOSFileAttributes(attributes & 0x3f)
        names = [flag.name.lower().replace('_', ' ') for flag in DOSFileAttributes if flag in dos_attrs]
        return [f"DOS attributes: {', '.join(names)}"] if names else []

    if is_posix_compatible_zip_os(host_os):
        mode = (attributes >> 16) & 0xffff
        return [f"POSIX mode: 0o{mode:06o}"] if mode != 0 else []

    return []
