"""Primitive readers — decode one value from a line at a given position.

Every reader has the signature ``(line, pos=0, quoted=False)`` and returns
``(value, consumed)`` where *consumed* is counted from *pos*. For quoted
values the count runs through the closing quote, so the caller lands on the
separator that follows it.
"""

import re
from datetime import datetime

from accesslog.errors import (
    DateTimeFormatError,
    ExpectedDigitError,
    IntegerRangeError,
    MalformedResponseSizeError,
    MissingClosingBracketError,
    MissingClosingQuoteError,
    UnexpectedCharError,
)

# Time layout of %t: 16/Nov/2016:09:25:05 +0100
STANDARD_ENGLISH_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_DELIMITER_RE = re.compile(r"[ \n]")
_SIGNED_INT_RE = re.compile(r"[+-]?[0-9]+")
_APACHE_TIME_RE = re.compile(r"[0-9]{2}/[A-Za-z]{3}/[0-9]{4}:[0-9]{2}:[0-9]{2}:[0-9]{2} [+-][0-9]{4}")


def _char_at(line: str, pos: int) -> str:
    """Character at *pos*, or '' past the end of the line."""
    return line[pos] if pos < len(line) else ""


def _scan_digits(line: str, start: int, end: int) -> int:
    """Index of the first non-digit in line[start:end]."""
    i = start
    while i < end and "0" <= line[i] <= "9":
        i += 1
    return i


def _to_int64(digits: str) -> int:
    value = int(digits)
    if not INT64_MIN <= value <= INT64_MAX:
        raise IntegerRangeError(f"value out of range: {digits}")
    return value


def extract_from_quotes(line: str, pos: int = 0) -> tuple[str, int]:
    """Return the text between the quote at *pos* and the next quote.

    The offset returned is that of the closing quote, relative to *pos*.
    """
    first = _char_at(line, pos)
    if first != '"':
        raise UnexpectedCharError(first, "quote")
    close = line.find('"', pos + 1)
    if close == -1:
        raise MissingClosingQuoteError()
    return line[pos + 1:close], close - pos


def read_string(line: str, pos: int = 0, quoted: bool = False) -> tuple[str, int]:
    """Read a token delimited by a space or newline, or a quoted token."""
    if quoted:
        data, off = extract_from_quotes(line, pos)
        return data, off + 1
    m = _DELIMITER_RE.search(line, pos)
    end = m.start() if m else len(line)
    return line[pos:end], end - pos


def read_datetime(line: str, pos: int = 0, quoted: bool = False) -> tuple[datetime, int]:
    """Read a bracketed Apache timestamp such as [16/Nov/2016:09:25:05 +0100]."""
    start, end = pos, len(line)
    if quoted:
        _, close = extract_from_quotes(line, pos)
        start, end = pos + 1, pos + close

    first = _char_at(line, start) if start < end else ""
    if first != "[":
        raise UnexpectedCharError(first, "'['")
    idx = line.find("]", start, end)
    if idx == -1:
        raise MissingClosingBracketError()

    consumed = end + 1 - pos if quoted else idx + 1 - pos
    text = line[start + 1:idx]
    if not _APACHE_TIME_RE.fullmatch(text):
        raise DateTimeFormatError(
            f"failed to parse datetime: {text!r} does not match DD/Mon/YYYY:HH:MM:SS +HHMM")
    try:
        value = datetime.strptime(text, STANDARD_ENGLISH_FORMAT)
    except ValueError as e:
        raise DateTimeFormatError(f"failed to parse datetime: {e}") from e
    return value, consumed


def read_int(line: str, pos: int = 0, quoted: bool = False) -> tuple[int, int]:
    """Read an unsigned run of ASCII digits as a 64-bit integer.

    Unquoted, the run ends at the first non-digit. Quoted, everything between
    the quotes must be digits.
    """
    if quoted:
        _, close = extract_from_quotes(line, pos)
        start, end = pos + 1, pos + close
    else:
        start, end = pos, len(line)

    stop = _scan_digits(line, start, end)
    if stop == start:
        raise ExpectedDigitError(line[start] if start < end else "")
    if quoted and stop != end:
        raise UnexpectedCharError(line[stop], "digit between 0 and 9")

    value = _to_int64(line[start:stop])
    return value, (end + 1 - pos) if quoted else (stop - pos)


def read_response_size_clf(line: str, pos: int = 0, quoted: bool = False) -> tuple[int, int]:
    """Read a %b value: '-' means no body and decodes to 0."""
    data, off = read_string(line, pos, quoted)
    if data == "-":
        return 0, off
    if not _SIGNED_INT_RE.fullmatch(data):
        raise MalformedResponseSizeError(f"malformed response size: {data!r}")
    try:
        return _to_int64(data), off
    except IntegerRangeError as e:
        raise MalformedResponseSizeError(f"malformed response size: {e}") from e
