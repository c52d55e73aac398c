"""
The ``zipdump`` command: dumps the structure of one or more ZIP files to stdout.
"""

import sys

from argparse import ArgumentParser, Namespace
from typing import Optional, Sequence
from logging import getLogger, DEBUG

from colorama import just_fix_windows_console

from atmfjstc.lib.cli_utils.console import console
from atmfjstc.lib.cli_utils.errors import fail, pretty_unhandled
from atmfjstc.lib.zip_dump import ZipDumpConfig, dump_zip_file, __version__
from atmfjstc.lib.zip_dump.cli.log_setup import init_console_friendly_logging


_log = getLogger(__name__)


@pretty_unhandled()
def main(argv: Optional[Sequence[str]] = None):
    args = _parse_args(argv)

    just_fix_windows_console()

    if args.debug:
        init_console_friendly_logging(DEBUG)

    config = config_from_args(args)
    _log.debug("Dumping %d file(s) with %r", len(args.files), config)

    for path in args.files:
        dump_one_file(path, config)


def dump_one_file(path: str, config: ZipDumpConfig):
    console.print_progress(f"<<< {path} >>> begin.")

    try:
        dump_zip_file(path, sys.stdout, config)
    except OSError as e:
        sys.stdout.flush()
        fail(f"Can't read input file: {path} ({e.strerror or e})")

    console.print_progress(f"<<< {path} >>> end.\n")


def config_from_args(args: Namespace) -> ZipDumpConfig:
    return ZipDumpConfig(
        full_dump=args.full_dump,
        quiet=args.quiet,
        omit_repeated_rows=args.omit_repeated_lines,
    )


def _parse_args(argv: Optional[Sequence[str]]) -> Namespace:
    parser = ArgumentParser(
        prog='zipdump',
        description="Dumps the record structure of ZIP files: every header field, file name, comment and extra "
                    "field, with hex dumps of the raw data.",
    )

    parser.add_argument('-f', '--full-dump', action='store_true', help="dump file data and unknown data in full")
    parser.add_argument('-q', '--quiet', action='store_true', help="omit offsets, skip notices and field notes")
    parser.add_argument(
        '-o', '--omit-repeated-lines', action='store_true', help="collapse runs of identical hex dump lines"
    )
    parser.add_argument('--debug', action='store_true', help="log the progress of the record walker to stderr")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('files', nargs='+', metavar='FILE', help="the ZIP files to dump")

    return parser.parse_args(argv)
