"""
Main entry point for lsmem.
"""

import argparse
import logging
import sys

from . import __version__
from .block_source import SysfsBlockSource
from .columns import DEFAULT_COLUMNS, columns_help, parse_columns
from .core import read_memory
from .errors import LsmemError
from .presentation import OutputMode, SummaryMode, render
from .utils import get_config, get_sysroot, setup_logging


def build_parser():
    parser = argparse.ArgumentParser(
        prog='lsmem',
        description='List the ranges of available memory with their online status.',
        epilog=f'Available columns:\n{columns_help()}',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-a', '--all', action='store_true', dest='list_all',
                        help='list each individual memory block')
    parser.add_argument('-b', '--bytes', action='store_true', default=None,
                        help='print SIZE in bytes rather than in human readable format')
    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument('-J', '--json', action='store_const', dest='mode', const=OutputMode.JSON,
                     help='use JSON output format')
    fmt.add_argument('-P', '--pairs', action='store_const', dest='mode', const=OutputMode.PAIRS,
                     help='use key="value" output format')
    fmt.add_argument('-r', '--raw', action='store_const', dest='mode', const=OutputMode.RAW,
                     help='use raw output format')
    parser.add_argument('-n', '--noheadings', action='store_true',
                        help="don't print headings")
    parser.add_argument('-o', '--output', metavar='LIST',
                        help='output columns (prefix with + to extend the defaults)')
    parser.add_argument('-s', '--sysroot', metavar='DIR',
                        help='use the specified directory as system root')
    parser.add_argument('-S', '--summary', nargs='?', const='only', metavar='WHEN',
                        choices=[m.value for m in SummaryMode],
                        help='print summary information (always, never or only; default only)')
    parser.add_argument('-H', '--list-columns', action='store_true',
                        help='list the available columns')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable debug output on stderr')
    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.set_defaults(mode=OutputMode.TABLE)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config()
    setup_logging(args.verbose, config.get('log_file'))

    if args.list_columns:
        print(columns_help())
        return 0

    in_bytes = args.bytes if args.bytes is not None else bool(config.get('bytes', False))
    summary = SummaryMode(args.summary) if args.summary else None

    try:
        columns = parse_columns(args.output if args.output is not None else config.get('output'),
                                DEFAULT_COLUMNS)
        source = SysfsBlockSource(get_sysroot(args.sysroot, config))
        info = read_memory(source, columns, list_all=args.list_all)
    except LsmemError as e:
        logging.debug("Aborting", exc_info=True)
        print(f"lsmem: {e}", file=sys.stderr)
        return 1

    print(render(info, columns, args.mode, in_bytes=in_bytes,
                 noheadings=args.noheadings, summary=summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
