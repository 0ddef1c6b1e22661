from typing import BinaryIO

from pprof_raw_converter.core.raw import ParseResult
from pprof_raw_converter.writers.legacy import frame_names


def format_stack_collapse(result: ParseResult) -> bytes:
    """Renders each record as one folded line, root first.

    Stacks are not merged, so identical stacks show up once per record:
      runtime.goexit;runtime.main;main.main;main.fib 3
    """
    all_ids = [func_id for record in result.records for func_id in record.location_ids]
    names = iter(frame_names(result, all_ids))

    lines = []
    for record in result.records:
        stack = [next(names) for _ in record.location_ids]
        lines.append(f"{';'.join(reversed(stack))} {record.sample_count}\n")

    return "".join(lines).encode("utf-8")


def write_stack_collapse(result: ParseResult, out: BinaryIO):
    out.write(format_stack_collapse(result))
