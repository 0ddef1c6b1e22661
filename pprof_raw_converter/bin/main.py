import argparse
import logging
import sys

from pprof_raw_converter.core.raw import ParseError, parse_raw_profile
from pprof_raw_converter.util.logging_utils import get_default_logger, set_level
from pprof_raw_converter.writers.legacy import write_legacy
from pprof_raw_converter.writers.stackcollapse import write_stack_collapse

logger = get_default_logger(__name__)

WRITERS = {
    "legacy": write_legacy,
    "folded": write_stack_collapse,
}


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def _write_output(path: str, result, writer):
    if path == "-":
        writer(result, sys.stdout.buffer)
        sys.stdout.flush()
    else:
        with open(path, "wb") as f:
            writer(result, f)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Convert a raw pprof dump (go tool pprof -raw) into stack-trace text."
    )
    parser.add_argument("-o", "--output", default="-", help="Output file, '-' for stdout")
    parser.add_argument(
        "-f",
        "--format",
        choices=sorted(WRITERS),
        default="legacy",
        help="legacy: one frame per line plus a count line; folded: root;...;leaf count",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("raw_file", help="Raw pprof dump, '-' for stdin")
    args = parser.parse_args(argv)

    if args.verbose:
        set_level(logging.DEBUG)

    data = _read_input(args.raw_file)
    try:
        result = parse_raw_profile(data)
    except ParseError as e:
        logger.error(f"failed to parse {args.raw_file}: {e}")
        return 1

    _write_output(args.output, result, WRITERS[args.format])
    logger.debug(f"wrote {len(result.records)} stacks to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
