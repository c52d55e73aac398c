"""
Rendering of the dump transcript: sections, fields and notes.

Every line of the transcript goes through a `DumpWriter`, which is the only component that touches the output sink.
"""

from enum import Enum
from typing import Iterable, Optional, TextIO

from atmfjstc.lib.zip_dump.config import ZipDumpConfig


LABEL_WIDTH = 32


class FieldFormat(Enum):
    DEC = 'dec'
    HEX = 'hex'
    DEC_HEX = 'dec_hex'
    DEC_UNLESS_SENTINEL = 'dec_unless_sentinel'
    """Decimal, unless the value is all ones (i.e. the real value is in the Zip64 extra field), in which case hex"""


def format_field_value(value: int, n_bytes: int, field_format: FieldFormat) -> str:
    """
    Renders a field value according to a display policy.

    Args:
        value: The raw (unsigned) value of the field
        n_bytes: The width of the field in bytes. Determines the width of the hex representation.
        field_format: The display policy

    Returns:
        The rendered value, e.g. ``'5'``, ``'0x0005'`` or ``'5(0x0005)'``.
    """
    hex_text = f"0x{value:0{n_bytes * 2}X}"

    if field_format == FieldFormat.DEC:
        return str(value)
    if field_format == FieldFormat.HEX:
        return hex_text
    if field_format == FieldFormat.DEC_HEX:
        return f"{value}({hex_text})"
    if field_format == FieldFormat.DEC_UNLESS_SENTINEL:
        return hex_text if value == (1 << (8 * n_bytes)) - 1 else str(value)

    raise ValueError(f"Unsupported field format: {field_format!r}")


class DumpWriter:
    """
    Writes the lines of a dump transcript to a text sink.
    """

    _sink: TextIO
    _config: ZipDumpConfig

    def __init__(self, sink: TextIO, config: ZipDumpConfig):
        self._sink = sink
        self._config = config

    @property
    def config(self) -> ZipDumpConfig:
        return self._config

    def line(self, text: str = '') -> 'DumpWriter':
        self._sink.write(text + '\n')
        return self

    def field(self, label: str, value: int, n_bytes: int, field_format: FieldFormat) -> 'DumpWriter':
        return self.line(f"{label:>{LABEL_WIDTH}} : {format_field_value(value, n_bytes, field_format)}")

    def note(self, text: str) -> 'DumpWriter':
        return self.line(f"{'':{LABEL_WIDTH}} * {text}")

    def notes(self, texts: Iterable[str]) -> 'DumpWriter':
        for text in texts:
            self.note(text)

        return self

    def problem(self, text: str) -> 'DumpWriter':
        """
        Reports anything out of the ordinary: unknown data, truncations, length mismatches.

        Problems are always shown, even in quiet mode.
        """
        return self.line(f"!! {text}")

    def truncation(self, label: str) -> 'DumpWriter':
        return self.problem(f"Data ends before {label}")

    def section(self, title: str, offset: Optional[int] = None, seq_no: Optional[int] = None) -> 'DumpWriter':
        head = f"[{title}]" if seq_no is None else f"[{title} #{seq_no}]"

        if (offset is not None) and not self._config.quiet:
            head += f" offset : {offset}(0x{offset:016X})"

        return self.line().line(head)

    def record_header(
        self, title: str, signature: int, offset: int, seq_no: Optional[int] = None
    ) -> 'DumpWriter':
        self.section(title, offset, seq_no)
        return self.field("header signature", signature, 4, FieldFormat.HEX)

    def extra_header(self, title: str, tag: int, length: int) -> 'DumpWriter':
        self.line().line(f"[-{title}]")
        self.field("extra tag", tag, 2, FieldFormat.HEX)
        return self.field("extra size", length, 2, FieldFormat.DEC_HEX)
