from dataclasses import dataclass, field
from enum import Enum, auto

from pprof_raw_converter.util.logging_utils import get_default_logger

logger = get_default_logger(__name__)

# Fields on a location line: "<id>: <addr> <name> <file:line> s=<n>"
MIN_LOCATION_FIELDS = 5


class ParseError(ValueError):
    """Raised on the first line of a raw dump that can't be parsed."""

    def __init__(self, reason: str, lineno: int = 0, line: str = ""):
        self.reason = reason
        self.lineno = lineno
        self.line = line
        if lineno:
            reason = f"line {lineno}: {reason}: {line!r}"
        super().__init__(reason)


@dataclass(frozen=True)
class StackRecord:
    sample_count: int
    # nanoseconds
    duration: int
    # leaf first
    location_ids: tuple[int, ...]


@dataclass
class ParseResult:
    records: list[StackRecord] = field(default_factory=list)
    func_names: dict[int, str] = field(default_factory=dict)
    sample_units: list[str] = field(default_factory=list)


class _State(Enum):
    ignore = auto()
    samples_header = auto()
    samples = auto()
    locations = auto()
    done = auto()


def split_by_space(s: str) -> list[str]:
    """Splits on runs of whitespace. An empty string gives [""], never []."""
    return s.split() or [""]


def _parse_uint(token: str, what: str) -> int:
    if not (token.isascii() and token.isdigit()):
        raise ParseError(f"invalid {what} {token!r}")
    return int(token)


class RawParser:
    """Parses the output of `go tool pprof -raw`.

    Only the Samples and Locations sections are read. Everything before
    "Samples:" and everything from "Mappings" on is skipped.
    """

    def __init__(self):
        self._state = _State.ignore
        self._result = ParseResult()

    def parse(self, data: bytes) -> ParseResult:
        self._state = _State.ignore
        self._result = ParseResult()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"input is not valid UTF-8 ({e})") from e

        for lineno, line in enumerate(text.splitlines(), start=1):
            try:
                self._process_line(line.strip())
            except ParseError as e:
                raise ParseError(e.reason, lineno, line) from None

        logger.debug(f"parsed {len(self._result.records)} records, "
                     f"{len(self._result.func_names)} locations")
        return self._result

    def _process_line(self, line: str):
        if not line:
            return

        if self._state == _State.ignore:
            if line == "Samples:":
                self._state = _State.samples_header
        elif self._state == _State.samples_header:
            self._result.sample_units = split_by_space(line)
            self._state = _State.samples
        elif self._state == _State.samples:
            if line.startswith("Locations"):
                self._state = _State.locations
            else:
                self._result.records.append(self._parse_sample(line))
        elif self._state == _State.locations:
            if line.startswith("Mappings"):
                self._state = _State.done
            else:
                func_id, name = self._parse_location(line)
                self._result.func_names[func_id] = name

    @staticmethod
    def _parse_sample(line: str) -> StackRecord:
        parts = line.split(":", 1)
        if len(parts) != 2:
            raise ParseError("sample line has no ':' separator")

        values = split_by_space(parts[0])
        if len(values) != 2:
            raise ParseError("sample line needs a count and a duration")
        count = _parse_uint(values[0], "sample count")
        duration = _parse_uint(values[1], "sample duration")

        stack = split_by_space(parts[1])
        if stack == [""]:
            raise ParseError("sample line has an empty stack")
        location_ids = tuple(_parse_uint(token, "funcID") for token in stack)

        return StackRecord(count, duration, location_ids)

    @staticmethod
    def _parse_location(line: str) -> tuple[int, str]:
        parts = split_by_space(line)
        if len(parts) < MIN_LOCATION_FIELDS:
            raise ParseError(f"location line needs at least {MIN_LOCATION_FIELDS} fields")

        func_id = _parse_uint(parts[0].removesuffix(":"), "funcID")
        return func_id, parts[2]


def parse_raw_profile(data: bytes) -> ParseResult:
    parser = RawParser()
    return parser.parse(data)
