"""Format compiler — turns a mod_log_config format string into an extraction chain.

A format string is a list of directives separated by single spaces:

  %h %l %u %t "%r" %s %b "%{Referer}i" "%{User-agent}i"

A directive wrapped in double quotes matches a quote-delimited value on the
log line; otherwise the value ends at the next space. Modifiers (<, >, !,
status lists) are not supported.

The chain is a flat tuple of steps run left to right by ExtractionChain.run.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator

from accesslog.errors import UnsupportedFormatError
from accesslog.fields import NAMED_LETTERS, FieldKind, lookup, named_placeholder
from accesslog.models import AccessLogEntry, RequestFirstLine
from accesslog.readers import (
    read_datetime,
    read_int,
    read_response_size_clf,
    read_string,
)

logger = logging.getLogger(__name__)

_NAMED_RE = re.compile(r"%\{(?P<name>[^{}]+)\}(?P<letter>[A-Za-z])")


class ErrorOrder(Enum):
    """Which unsupported token is reported when a format has several."""

    RIGHT_TO_LEFT = "right-to-left"  # last bad token wins
    LEFT_TO_RIGHT = "left-to-right"  # first bad token wins


@dataclass(frozen=True)
class Directive:
    kind: FieldKind
    quoted: bool = False
    name: str | None = None  # only for %{Name}C, %{Name}e, %{Name}i

    def __str__(self) -> str:
        if self.kind.is_named:
            text = "%{" + (self.name or "...") + "}" + self.kind.value[-1]
        else:
            text = self.kind.value
        return f'"{text}"' if self.quoted else text


def parse_directive(token: str) -> Directive:
    """Resolve one format-string token. Raises UnsupportedFormatError."""
    text = token
    quoted = len(text) >= 2 and text.startswith('"') and text.endswith('"')
    if quoted:
        text = text[1:-1]

    name = None
    m = _NAMED_RE.fullmatch(text)
    if m and m.group("letter") in NAMED_LETTERS:
        name = m.group("name")
        text = named_placeholder(m.group("letter"))

    kind = lookup(text)
    if kind is FieldKind.UNKNOWN:
        raise UnsupportedFormatError(token)
    return Directive(kind=kind, quoted=quoted, name=name)


# kind → (reader, record attribute, converter)
_EXTRACTORS: dict[FieldKind, tuple[Callable, str, Callable | None]] = {
    FieldKind.REMOTE_IP_ADDRESS: (read_string, "remote_ip_addr", None),
    FieldKind.LOCAL_IP_ADDRESS: (read_string, "local_ip_addr", None),
    FieldKind.RESPONSE_SIZE: (read_int, "response_size", None),
    FieldKind.RESPONSE_SIZE_CLF: (read_response_size_clf, "response_size", None),
    FieldKind.COOKIE: (read_string, "cookies", None),
    FieldKind.ELAPSED_TIME: (read_int, "elapsed_time", None),
    FieldKind.ELAPSED_TIME_IN_SEC: (read_int, "elapsed_time_sec", None),
    FieldKind.ENV_VAR: (read_string, "env_vars", None),
    FieldKind.HEADER: (read_string, "headers", None),
    FieldKind.FILENAME: (read_string, "filename", None),
    FieldKind.REMOTE_HOST: (read_string, "remote_host", None),
    FieldKind.REQUEST_PROTO: (read_string, "request_proto", None),
    FieldKind.REMOTE_LOGNAME: (read_string, "remote_logname", None),
    FieldKind.REQUEST_METHOD: (read_string, "request_method", None),
    FieldKind.PORT: (read_string, "port", None),
    FieldKind.PROCESS_ID: (read_int, "process_id", None),
    FieldKind.QUERY_STRING: (read_string, "query_string", None),
    FieldKind.REQUEST_FIRST_LINE: (read_string, "request_first_line", RequestFirstLine),
    FieldKind.STATUS: (read_string, "status", None),
    FieldKind.TIME: (read_datetime, "time", None),
    FieldKind.REMOTE_USER: (read_string, "remote_user", None),
    FieldKind.URL_PATH: (read_string, "url_path", None),
    FieldKind.CANONICAL_SERVER_NAME: (read_string, "canonical_server_name", None),
    FieldKind.SERVER_NAME: (read_string, "server_name", None),
    FieldKind.BYTES_RECEIVED: (read_int, "bytes_received", None),
    FieldKind.BYTES_SENT: (read_int, "bytes_sent", None),
}


@dataclass(frozen=True)
class Step:
    """Extracts one directive's value from a line into a record."""

    directive: Directive

    @property
    def attribute(self) -> str:
        return _EXTRACTORS[self.directive.kind][1]

    def extract(self, entry: AccessLogEntry, line: str, pos: int) -> int:
        """Store the value found at *pos* on *entry*; return the characters consumed."""
        read, attribute, convert = _EXTRACTORS[self.directive.kind]
        value, consumed = read(line, pos, self.directive.quoted)
        if convert is not None:
            value = convert(value)
        if self.directive.kind.is_named:
            getattr(entry, attribute)[self.directive.name] = value
        else:
            setattr(entry, attribute, value)
        return consumed


class ExtractionChain:
    """Immutable, ordered list of steps compiled from one format string.

    Safe to share between parsers and threads: run() only touches the
    record it is given.
    """

    def __init__(self, directives: tuple[Directive, ...] = ()):
        self._steps = tuple(Step(d) for d in directives)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Directive]:
        return (step.directive for step in self._steps)

    def __str__(self) -> str:
        return " ".join(str(step.directive) for step in self._steps)

    def __repr__(self) -> str:
        return f"ExtractionChain({str(self)!r})"

    @property
    def fields(self) -> tuple[str, ...]:
        """Record attributes populated by this chain, in first-seen order."""
        return tuple(dict.fromkeys(step.attribute for step in self._steps))

    def run(self, entry: AccessLogEntry, line: str) -> AccessLogEntry:
        """Populate *entry* from *line*, left to right from position 0.

        Stops early at the line terminator. Reader errors propagate.
        """
        pos = 0
        for step in self._steps:
            pos += step.extract(entry, line, pos)
            if pos < len(line) and line[pos] == " ":
                pos += 1  # jump over the separator
            if pos >= len(line) or line[pos] == "\n":
                break
        return entry


def split_format(log_format: str | None) -> list[str]:
    """Split a format string into directive tokens on single spaces."""
    if not log_format:
        return []
    return log_format.split(" ")


def compile_format(log_format: str | None,
                   error_order: ErrorOrder = ErrorOrder.RIGHT_TO_LEFT) -> ExtractionChain:
    """Compile *log_format* into an ExtractionChain.

    An empty format compiles to an empty chain. With several unsupported
    tokens, *error_order* decides which one is reported.
    """
    tokens = split_format(log_format)

    indexed = list(enumerate(tokens))
    if error_order is ErrorOrder.RIGHT_TO_LEFT:
        indexed.reverse()
    resolved = {index: parse_directive(token) for index, token in indexed}

    chain = ExtractionChain(tuple(resolved[i] for i in range(len(tokens))))
    logger.debug("Compiled %d directive(s) from format %r", len(chain), log_format)
    return chain
