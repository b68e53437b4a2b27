# tracefile.py
import collections
import logging

# valgrind lackey style: "[space]op addr,size"; I records are instruction fetches
OPS = ("L", "S", "M")
ADDRESS_LIMIT = 1 << 64

TraceRecord = collections.namedtuple("TraceRecord", ["kind", "address", "size"])


class TraceFormatError(ValueError):
    pass


def parse_line(line):
    """
    Decode one trace line. Returns a TraceRecord, or None for lines that carry
    no data access (blank, I, unknown op). Raises TraceFormatError otherwise.
    """
    text = line.strip()
    if not text:
        return None
    # files are decoded with errors="replace"
    if "\ufffd" in text:
        raise TraceFormatError("undecodable bytes in {!r}".format(text))
    parts = text.split(None, 1)
    op = parts[0]
    if op not in OPS:
        if op != "I":
            logging.debug("skipping unknown op {!r}".format(op))
        return None
    if len(parts) != 2 or "," not in parts[1]:
        raise TraceFormatError("expected '<op> <addr>,<size>', got {!r}".format(text))
    addr_text, size_text = parts[1].split(",", 1)
    try:
        address = int(addr_text.strip(), 16)
        size = int(size_text.strip())
    except ValueError:
        raise TraceFormatError("bad address or size in {!r}".format(text))
    if address < 0 or address >= ADDRESS_LIMIT:
        raise TraceFormatError("address out of 64-bit range in {!r}".format(text))
    if size < 0:
        raise TraceFormatError("negative size in {!r}".format(text))
    return TraceRecord(op, address, size)


def parse_trace(lines):
    """
    Yield TraceRecords from an iterable of lines. Stops at the first malformed
    line; everything before it has already been yielded.
    """
    for lineno, line in enumerate(lines, 1):
        try:
            record = parse_line(line)
        except TraceFormatError as e:
            logging.warning("line {}: {}; ignoring the rest of the trace".format(lineno, e))
            return
        if record is not None:
            yield record


def read_trace(path):
    with open(path, "r", errors="replace") as f:
        yield from parse_trace(f)


def format_record(record):
    return "{} {:x},{}".format(record.kind, record.address, record.size)
