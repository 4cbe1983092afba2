"""Streaming parser — one AccessLogEntry per line of a line source."""

import logging
from typing import Iterable, Iterator

from accesslog.errors import ParseError
from accesslog.format import ErrorOrder, ExtractionChain, compile_format
from accesslog.models import AccessLogEntry

logger = logging.getLogger(__name__)

COMBINED_LOG_FORMAT = '%h %l %u %t "%r" %s %b "%{Referer}i" "%{User-agent}i"'
COMMON_LOG_FORMAT = '%h %l %u %t "%r" %s %b'

PRESETS = {
    "combined": COMBINED_LOG_FORMAT,
    "common": COMMON_LOG_FORMAT,
}


def resolve_format(log_format: str | None) -> str | None:
    """Map a preset name to its format string; other values pass through."""
    if log_format is None:
        return None
    return PRESETS.get(log_format, log_format)


class Parser:
    """Parses access log lines read from *source*.

    *source* is any iterable of text lines (an open file, a list, a
    generator). *log_format* is a preset name, a format string or an
    already compiled ExtractionChain.

    A Parser keeps its position in the source and must not be shared
    between threads; the compiled chain can be.
    """

    def __init__(self, source: Iterable[str],
                 log_format: str | ExtractionChain = "combined",
                 *, error_order: ErrorOrder = ErrorOrder.RIGHT_TO_LEFT):
        if source is None:
            raise ValueError("source is None")
        if isinstance(log_format, ExtractionChain):
            self._chain = log_format
        else:
            self._chain = compile_format(resolve_format(log_format), error_order)
        self._lines = iter(source)
        self._line_number = 0
        self._exhausted = False

    @property
    def chain(self) -> ExtractionChain:
        return self._chain

    @property
    def line_number(self) -> int:
        """Number of lines read from the source so far."""
        return self._line_number

    def parse(self) -> AccessLogEntry | None:
        """Parse the next line. Returns None once the source is exhausted.

        Raises ParseError (with line_number and line set) if the line does
        not match the format.
        """
        if self._exhausted:
            return None
        line = next(self._lines, None)
        if line is None:
            self._exhausted = True
            logger.debug("Line source exhausted after %d line(s)", self._line_number)
            return None
        self._line_number += 1

        entry = AccessLogEntry()
        try:
            return self._chain.run(entry, line)
        except ParseError as e:
            e.line_number = self._line_number
            e.line = line
            raise

    def __iter__(self) -> Iterator[AccessLogEntry]:
        return self

    def __next__(self) -> AccessLogEntry:
        entry = self.parse()
        if entry is None:
            raise StopIteration
        return entry


def combined_parser(source: Iterable[str]) -> Parser:
    """Parser for the Apache Combined Log Format."""
    return Parser(source, COMBINED_LOG_FORMAT)


def common_parser(source: Iterable[str]) -> Parser:
    """Parser for the Apache Common Log Format."""
    return Parser(source, COMMON_LOG_FORMAT)
