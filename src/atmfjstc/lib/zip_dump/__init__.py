"""
A structural dumper for ZIP archives.

The dumper walks an archive record by record and renders every header field, file name, comment and extra field chunk
as a human-readable transcript, along with hex dumps of raw data. It is meant for inspecting damaged or unusual
archives, so it does not trust the central directory: it scans forward for record signatures, decodes whatever it
finds, and reports anything in between as unknown data.

Basic use::

    from atmfjstc.lib.zip_dump import dump_zip_data, ZipDumpConfig

    print(dump_zip_data(raw_bytes, ZipDumpConfig(full_dump=True)))
"""

from io import StringIO
from os import PathLike
from typing import BinaryIO, Optional, TextIO, Union

from atmfjstc.lib.zip_dump.config import ZipDumpConfig
from atmfjstc.lib.zip_dump.context import DumpContext
from atmfjstc.lib.zip_dump.output import DumpWriter
from atmfjstc.lib.zip_dump.reading import open_zip_reader
from atmfjstc.lib.zip_dump.walker import walk_zip_records


__version__ = '1.0.0'


def dump_zip_stream(data_or_fileobj: Union[bytes, BinaryIO], sink: TextIO, config: Optional[ZipDumpConfig] = None):
    """
    Dumps a ZIP archive, from the current position of the stream up to its end.

    Args:
        data_or_fileobj: The archive, either as a `bytes` object or a seekable binary file object.
        sink: The text stream the transcript is written to.
        config: Dump options. Defaults to a plain dump (no full dump, not quiet).
    """
    config = config or ZipDumpConfig()

    walk_zip_records(DumpContext(
        reader=open_zip_reader(data_or_fileobj),
        writer=DumpWriter(sink, config),
        config=config,
    ))


def dump_zip_data(data: bytes, config: Optional[ZipDumpConfig] = None) -> str:
    """
    Convenience function that dumps an in-memory archive and returns the transcript as a string.
    """
    sink = StringIO()
    dump_zip_stream(data, sink, config)

    return sink.getvalue()


def dump_zip_file(path: Union[str, PathLike], sink: TextIO, config: Optional[ZipDumpConfig] = None):
    """
    Dumps the ZIP archive at a given path, preceded by a banner line naming the file.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(path, 'rb') as f:
        DumpWriter(sink, config or ZipDumpConfig()).line(f'*** zipdump of "{path}" ***')
        dump_zip_stream(f, sink, config)
