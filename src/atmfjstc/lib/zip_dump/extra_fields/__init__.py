"""
Dumping of ZIP "extra field" areas, i.e. the sequences of tagged chunks attached to local headers, central directory
headers and the archive extra data record.
"""

from typing import Dict

from atmfjstc.lib.zip_dump.context import DumpContext
from atmfjstc.lib.zip_dump.enums import ExtraFieldTag


EXTRA_FIELD_TITLES: Dict[int, str] = {
    ExtraFieldTag.ZIP64: "Zip64 Extended Information Extra Field",
    ExtraFieldTag.OS2_EXTENDED_ATTRIBUTES: "OS/2 Extended Attributes Extra Field",
    ExtraFieldTag.NTFS: "NTFS Extra Field",
    ExtraFieldTag.NT_SECURITY_DESCRIPTOR: "Windows NT Security Descriptor Extra Field",
    ExtraFieldTag.EXTENDED_TIMESTAMP: "Extended Timestamp Extra Field",
    ExtraFieldTag.INFOZIP_UNICODE_COMMENT: "Info-ZIP Unicode Comment Extra Field",
    ExtraFieldTag.INFOZIP_UNICODE_PATH: "Info-ZIP Unicode Path Extra Field",
}

UNKNOWN_EXTRA_FIELD_TITLE = "!! Unknown Extra Field"


def dump_extra_field(ctx: DumpContext, length: int):
    """
    Dumps an extra field area of the given declared length, consuming exactly that many bytes (or whatever is left, if
    the data ends first).

    Raises:
        TruncatedFieldError: If the data ended before the whole area could be read. Whatever was available is dumped
            first.
    """
    from ._decode import dump_extra_field_area

    dump_extra_field_area(ctx, length)
