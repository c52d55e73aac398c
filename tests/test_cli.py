import os
import subprocess
import sys
import unittest

from contextlib import redirect_stdout, redirect_stderr
from io import StringIO
from logging import DEBUG
from tempfile import TemporaryDirectory
from unittest.mock import patch

from atmfjstc.lib.zip_dump import dump_zip_data, ZipDumpConfig, __version__
from atmfjstc.lib.zip_dump.cli import main

from zip_fixtures import minimal_archive


class MainTest(unittest.TestCase):
    def setUp(self):
        self._temp_dir = TemporaryDirectory()
        self.path = os.path.join(self._temp_dir.name, 'test.zip')

        with open(self.path, 'wb') as f:
            f.write(minimal_archive())

    def tearDown(self):
        self._temp_dir.cleanup()

    def _run(self, *args):
        stdout = StringIO()
        with redirect_stdout(stdout):
            main(list(args))

        return stdout.getvalue()

    def test_banners(self):
        output = self._run(self.path)

        self.assertEqual(
            output,
            f'<<< {self.path} >>> begin.\n'
            f'*** zipdump of "{self.path}" ***\n' +
            dump_zip_data(minimal_archive()) +
            f'<<< {self.path} >>> end.\n\n'
        )

    def test_options(self):
        output = self._run('-f', '-q', '-o', self.path)

        expected = dump_zip_data(minimal_archive(), ZipDumpConfig(full_dump=True, quiet=True, omit_repeated_rows=True))

        self.assertIn(expected, output)

    def test_multiple_files(self):
        output = self._run(self.path, self.path)

        self.assertEqual(output.count('>>> begin.'), 2)
        self.assertEqual(output.count('>>> end.'), 2)

    def test_missing_file(self):
        missing = os.path.join(self._temp_dir.name, 'missing.zip')
        stderr = StringIO()

        with redirect_stderr(stderr), self.assertRaises(SystemExit) as cm:
            self._run(missing)

        self.assertNotEqual(cm.exception.code, 0)
        self.assertIn(f"Can't read input file: {missing}", stderr.getvalue())

    def test_no_files(self):
        with redirect_stderr(StringIO()), self.assertRaises(SystemExit) as cm:
            self._run()

        self.assertEqual(cm.exception.code, 2)

    def test_version(self):
        stdout = StringIO()

        with redirect_stdout(stdout), self.assertRaises(SystemExit):
            main(['--version'])

        self.assertEqual(stdout.getvalue(), f"zipdump {__version__}\n")

    def test_debug_enables_logging(self):
        with patch('atmfjstc.lib.zip_dump.cli.init_console_friendly_logging') as init_logging:
            output = self._run('--debug', self.path)

        init_logging.assert_called_once_with(DEBUG)
        self.assertIn('<<< ', output)

    def test_run_as_module(self):
        result = subprocess.run(
            [sys.executable, '-m', 'atmfjstc.lib.zip_dump', '-q', self.path],
            stdout=subprocess.PIPE, stderr=subprocess.PIPE, universal_newlines=True,
        )

        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertIn('[End of central directory record]', result.stdout)
