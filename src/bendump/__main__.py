"""
Command-line front end printing the decoded tree of a bencoded file.

Usage: ``bendump FILE [--indent N] [--strict] [--max-depth N] [--verbose]``
or ``python -m bendump FILE``.
"""

import argparse
import logging
import sys

from . import DEFAULT_MAX_DEPTH
from . import BencodeDecodeError
from . import __version__
from . import parse
from . import print_value
from . import read_file

logger = logging.getLogger("bendump.cli")

EXIT_OK = 0
EXIT_READ_ERROR = 1
EXIT_USAGE = 2  # argparse's own exit status
EXIT_DECODE_ERROR = 3


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        msg = f"expected a non-negative integer, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="bendump",
        description="Decode a bencoded file and print its value tree.",
    )
    ap.add_argument(
        "file", help="path to a bencoded file (.torrent, .fastresume, ...)"
    )
    ap.add_argument(
        "--indent",
        type=_non_negative_int,
        default=0,
        help="starting indentation level (two spaces per level)",
    )
    ap.add_argument(
        "--strict",
        action="store_true",
        help="reject leading zeros, unsorted keys and trailing data",
    )
    ap.add_argument(
        "--max-depth",
        type=_non_negative_int,
        default=DEFAULT_MAX_DEPTH,
        help=f"maximum list/dictionary nesting (default {DEFAULT_MAX_DEPTH})",
    )
    ap.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    ap.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return ap


def main(argv: list[str] | None = None) -> int:
    """Runs the command line; returns the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        data = read_file(args.file)
    except OSError as exc:
        print(f"bendump: failed to read {args.file}: {exc}", file=sys.stderr)
        return EXIT_READ_ERROR
    logger.debug("read %d bytes from %s", len(data), args.file)

    try:
        value = parse(data, strict=args.strict, max_depth=args.max_depth)
    except BencodeDecodeError as exc:
        print(f"bendump: {exc} [{exc.kind.name}]", file=sys.stderr)
        return EXIT_DECODE_ERROR

    print_value(value, args.indent)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
