from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from atmfjstc.lib.binary_utils.BinaryReader import BinaryReader
from atmfjstc.lib.zip_dump.config import ZipDumpConfig
from atmfjstc.lib.zip_dump.errors import TruncatedFieldError
from atmfjstc.lib.zip_dump.output import DumpWriter, FieldFormat
from atmfjstc.lib.zip_dump.reading import maybe_read_int


NotesFunc = Callable[[int], Iterable[str]]


@dataclass(frozen=True)
class DumpContext:
    """
    Everything a decoder needs: where to read from, where to write to, and how.
    """
    reader: BinaryReader
    writer: DumpWriter
    config: ZipDumpConfig

    def field(
        self, label: str, n_bytes: int, field_format: FieldFormat, notes: Optional[NotesFunc] = None
    ) -> int:
        """
        Reads a little-endian field and prints it, along with its interpretive notes (unless in quiet mode).

        Raises:
            TruncatedFieldError: If the data ends before the field is complete.
        """
        value = maybe_read_int(self.reader, n_bytes, label)
        if value is None:
            raise TruncatedFieldError(label, self.reader.tell())

        self.writer.field(label, value, n_bytes, field_format)

        if (notes is not None) and not self.config.quiet:
            self.writer.notes(notes(value))

        return value

    def maybe_note(self, text: str):
        if not self.config.quiet:
            self.writer.note(text)

    def with_reader(self, reader: BinaryReader) -> 'DumpContext':
        return replace(self, reader=reader)
