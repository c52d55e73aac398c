from dataclasses import dataclass


@dataclass(frozen=True)
class ZipDumpConfig:
    """
    Options controlling a ZIP dump pass.

    Attributes:
        full_dump: If True, file data and unknown data are rendered as hex/ASCII dumps. Otherwise they are skipped over
            and only their length is reported.
        quiet: If True, record offsets, skip summaries and interpretive notes (versions, flags, dates etc.) are omitted.
        omit_repeated_rows: If True, runs of identical rows in a hex dump are replaced by a single ``*`` line.
    """
    full_dump: bool = False
    quiet: bool = False
    omit_repeated_rows: bool = False
