import pytest

from tracefile import TraceFormatError, TraceRecord, format_record, parse_line, parse_trace, read_trace


def test_parse_data_records():
    assert parse_line(" L 10,1") == TraceRecord("L", 0x10, 1)
    assert parse_line(" S 7ff0005c8,8\n") == TraceRecord("S", 0x7FF0005C8, 8)
    assert parse_line("M 0x20,4") == TraceRecord("M", 0x20, 4)


@pytest.mark.parametrize("line", ["", "   \n", "I 0400d7d4,8", "X 10,1"])
def test_lines_without_data_access_are_skipped(line):
    assert parse_line(line) is None


@pytest.mark.parametrize("line", [" L zz,1", " L 10", " S 10,x", " L", " L 10000000000000000,1"])
def test_malformed_lines_raise(line):
    with pytest.raises(TraceFormatError):
        parse_line(line)


def test_malformed_line_stops_consumption():
    lines = [" L 10,1", "I 400,4", " S bogus", " L 20,1"]
    assert list(parse_trace(lines)) == [TraceRecord("L", 0x10, 1)]


def test_read_trace_from_file(tmp_path):
    path = tmp_path / "t.trace"
    path.write_text("I 0400d7d4,8\n L 7ff0005c8,8\n M 0421c7f0,4\n")
    assert list(read_trace(str(path))) == [
        TraceRecord("L", 0x7FF0005C8, 8),
        TraceRecord("M", 0x0421C7F0, 4),
    ]


def test_read_trace_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        list(read_trace(str(tmp_path / "nope.trace")))


def test_format_record():
    assert format_record(TraceRecord("M", 0x7FF0005C8, 8)) == "M 7ff0005c8,8"


def test_undecodable_bytes_stop_consumption(tmp_path):
    path = tmp_path / "binary.trace"
    path.write_bytes(b" L 10,1\n L 20,1\n\xff\xfe garbage\n L 30,1\n")
    assert list(read_trace(str(path))) == [
        TraceRecord("L", 0x10, 1),
        TraceRecord("L", 0x20, 1),
    ]
