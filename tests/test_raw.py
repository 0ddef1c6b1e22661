from pathlib import Path

import pytest

from pprof_raw_converter.core.raw import ParseError, RawParser, StackRecord, parse_raw_profile, split_by_space

TESTDATA = Path(__file__).parent / "testdata"

SIMPLE_TEMPLATE = """
Samples:
samples/count cpu/nanoseconds
   2   10000000: 4 5 6
Locations:
   3: 0xaaaaa funcName :0 s=0
"""


@pytest.fixture
def raw_bytes():
    return (TESTDATA / "pprof.raw.txt").read_bytes()


@pytest.mark.parametrize("s, expected", [
    ("", [""]),
    ("   ", [""]),
    ("test", ["test"]),
    ("1 2", ["1", "2"]),
    ("1  2   3", ["1", "2", "3"]),
    ("1  2      3   4 ", ["1", "2", "3", "4"]),
    ("\t1\t 2", ["1", "2"]),
])
def test_split_by_space(s, expected):
    assert split_by_space(s) == expected


def test_parse_testdata(raw_bytes):
    result = parse_raw_profile(raw_bytes)

    assert len(result.records) == 5
    assert result.records[0] == StackRecord(1, 10000000, (1, 2, 2, 3, 4, 5, 6))
    assert result.records[3] == StackRecord(12, 120000000, (12, 13, 14, 15, 16))
    assert result.sample_units == ["samples/count", "cpu/nanoseconds"]

    assert len(result.func_names) == 16
    assert result.func_names[1] == "main.fib"
    assert result.func_names[3] == "main.fib"
    assert result.func_names[16] == "runtime.morestack"


def test_parse_keeps_record_order(raw_bytes):
    result = parse_raw_profile(raw_bytes)
    assert [r.sample_count for r in result.records] == [1, 3, 1, 12, 2]


def test_parse_skips_mappings(raw_bytes):
    # the Mappings line "1: 0x0/0x84000/0x0 ..." must not overwrite location 1
    result = parse_raw_profile(raw_bytes)
    assert result.func_names[1] == "main.fib"


def test_parse_simple_template():
    result = parse_raw_profile(SIMPLE_TEMPLATE.encode())
    assert result.records == [StackRecord(2, 10000000, (4, 5, 6))]
    assert result.func_names == {3: "funcName"}


def test_redeclared_location_last_wins():
    contents = SIMPLE_TEMPLATE + "   3: 0xbbbbb otherName :1 s=0\n"
    result = parse_raw_profile(contents.encode())
    assert result.func_names == {3: "otherName"}


def test_parser_instance_returns_result():
    result = RawParser().parse(SIMPLE_TEMPLATE.encode())
    assert len(result.records) == 1


def test_stack_record_is_immutable():
    record = StackRecord(1, 10, (1,))
    with pytest.raises(AttributeError):
        record.sample_count = 2


@pytest.mark.parametrize("old, new", [
    ("4 5 6", "?sample? 5 6"),
    ("3: 0xaaaaa", "?location?: 0xaaaaa"),
    ("   2   10000000", "   ??   10000000"),
    ("   2   10000000", "   2   ??"),
    ("   2   10000000", "   -2   10000000"),
    ("   2   10000000", "   2"),
    ("   2   10000000", "   2 3 10000000"),
    ("10000000: 4 5 6", "10000000:"),
    ("10000000: 4 5 6", "10000000 4 5 6"),
    ("4 5 6", "4 5x 6"),
])
def test_parse_bad_input(old, new):
    contents = SIMPLE_TEMPLATE.replace(old, new)
    assert contents != SIMPLE_TEMPLATE
    with pytest.raises(ParseError):
        parse_raw_profile(contents.encode())


def test_parse_malformed_sample():
    contents = """
Samples:
samples/count cpu/nanoseconds
   1
Locations:
   3: 0xaaaaa funcName :0 s=0
"""
    with pytest.raises(ParseError) as exc_info:
        parse_raw_profile(contents.encode())
    assert exc_info.value.lineno == 4
    assert "line 4" in str(exc_info.value)


def test_parse_malformed_location():
    contents = """
Samples:
samples/count cpu/nanoseconds
   1 10000: 2
Locations:
   3
"""
    with pytest.raises(ParseError):
        parse_raw_profile(contents.encode())


def test_parse_location_missing_skip_field():
    contents = SIMPLE_TEMPLATE.replace(" s=0", "")
    with pytest.raises(ParseError):
        parse_raw_profile(contents.encode())


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_raw_profile(SIMPLE_TEMPLATE.replace("4 5 6", "x").encode())


def test_parse_invalid_utf8():
    with pytest.raises(ParseError):
        parse_raw_profile(b"Samples:\n\xff\xfe\n")


def test_parse_empty_input():
    result = parse_raw_profile(b"")
    assert result.records == []
    assert result.func_names == {}
