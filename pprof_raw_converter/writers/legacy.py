from typing import BinaryIO

from pprof_raw_converter.core.raw import ParseResult, parse_raw_profile
from pprof_raw_converter.util.logging_utils import get_default_logger

logger = get_default_logger(__name__)


def frame_names(result: ParseResult, location_ids) -> list[str]:
    """Looks up the function name for each location ID.

    IDs missing from the Locations section come out as the decimal ID itself,
    so the output stays well formed and the gap is still visible.
    """
    names = []
    missing = set()
    for func_id in location_ids:
        name = result.func_names.get(func_id)
        if name is None:
            missing.add(func_id)
            name = str(func_id)
        names.append(name)

    for func_id in sorted(missing):
        logger.warning(f"funcID {func_id} has no location, using the ID as its name")
    return names


def format_legacy(result: ParseResult) -> bytes:
    """Renders the records as the legacy stack format.

    Each stack is written leaf first, one function per line, followed by a
    line with its sample count:
      main.fib
      main.main
      runtime.main
      3
    """
    lines = []
    all_ids = [func_id for record in result.records for func_id in record.location_ids]
    names = iter(frame_names(result, all_ids))
    for record in result.records:
        for _ in record.location_ids:
            lines.append(next(names))
        lines.append(str(record.sample_count))

    return "".join(f"{line}\n" for line in lines).encode("utf-8")


def parse_raw(data: bytes) -> bytes:
    """Converts a raw pprof dump into the legacy stack format.

    Raises ParseError if the dump is malformed; nothing is returned in that case.
    """
    return format_legacy(parse_raw_profile(data))


def write_legacy(result: ParseResult, out: BinaryIO):
    out.write(format_legacy(result))
