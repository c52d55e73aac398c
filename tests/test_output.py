import unittest

from io import StringIO

from atmfjstc.lib.zip_dump.config import ZipDumpConfig
from atmfjstc.lib.zip_dump.output import DumpWriter, FieldFormat, format_field_value


class FormatFieldValueTest(unittest.TestCase):
    def test_dec(self):
        self.assertEqual(format_field_value(1234, 4, FieldFormat.DEC), '1234')

    def test_hex_is_padded_to_field_width(self):
        self.assertEqual(format_field_value(0x4b50, 4, FieldFormat.HEX), '0x00004B50')
        self.assertEqual(format_field_value(0x14, 2, FieldFormat.HEX), '0x0014')

    def test_dec_hex(self):
        self.assertEqual(format_field_value(5, 2, FieldFormat.DEC_HEX), '5(0x0005)')

    def test_dec_unless_sentinel(self):
        self.assertEqual(format_field_value(3, 2, FieldFormat.DEC_UNLESS_SENTINEL), '3')
        self.assertEqual(format_field_value(0xffff, 2, FieldFormat.DEC_UNLESS_SENTINEL), '0xFFFF')
        self.assertEqual(format_field_value(0xffff, 4, FieldFormat.DEC_UNLESS_SENTINEL), '65535')


class DumpWriterTest(unittest.TestCase):
    def _writer(self, **config_args):
        sink = StringIO()
        return DumpWriter(sink, ZipDumpConfig(**config_args)), sink

    def test_field_and_note(self):
        writer, sink = self._writer()

        writer.field("crc-32", 0, 4, FieldFormat.HEX).note("text file")

        self.assertEqual(sink.getvalue(), ' ' * 26 + 'crc-32 : 0x00000000\n' + ' ' * 32 + ' * text file\n')

    def test_record_header(self):
        writer, sink = self._writer()

        writer.record_header("Local file header", 0x04034b50, 16, 2)

        self.assertEqual(
            sink.getvalue(),
            "\n[Local file header #2] offset : 16(0x0000000000000010)\n" + ' ' * 16 + "header signature : 0x04034B50\n"
        )

    def test_quiet_section_omits_offset(self):
        writer, sink = self._writer(quiet=True)

        writer.section(".ZIP file comment", 100)

        self.assertEqual(sink.getvalue(), "\n[.ZIP file comment]\n")

    def test_extra_header(self):
        writer, sink = self._writer()

        writer.extra_header("NTFS Extra Field", 0x000a, 32)

        self.assertEqual(
            sink.getvalue().splitlines(),
            ['', '[-NTFS Extra Field]', ' ' * 23 + 'extra tag : 0x000A', ' ' * 22 + 'extra size : 32(0x0020)']
        )

    def test_problems_are_shown_in_quiet_mode(self):
        writer, sink = self._writer(quiet=True)

        writer.truncation("crc-32")

        self.assertEqual(sink.getvalue(), "!! Data ends before crc-32\n")
