"""Access log record and the lazily decoded request line."""

import logging
import re
from dataclasses import dataclass, field, fields as dataclass_fields
from datetime import datetime
from functools import cached_property
from typing import Any
from urllib.parse import unquote

logger = logging.getLogger(__name__)

# A '%' not followed by two hex digits cannot be percent-decoded
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _unescape_path(path: str) -> str:
    """Percent-decode *path*, raising ValueError on malformed escapes."""
    if _BAD_ESCAPE_RE.search(path):
        raise ValueError(f"invalid escape in {path!r}")
    return unquote(path, errors="strict")


@dataclass(frozen=True)
class RequestFirstLine:
    """Raw text of the HTTP request line, e.g. 'GET /a?b=1 HTTP/1.1'.

    Splitting into method/path/protocol happens on first access and is
    cached on the instance. A line that is not exactly three space-separated
    parts decodes to empty strings. The decoded path falls back to the raw
    path when percent-decoding fails.
    """

    raw: str = ""

    @cached_property
    def _parts(self) -> tuple[str, str, str]:
        parts = self.raw.split(" ", 2)
        if len(parts) != 3:
            return "", "", ""
        return parts[0], parts[1], parts[2]

    @property
    def is_decoded(self) -> bool:
        return "_parts" in self.__dict__

    @property
    def method(self) -> str:
        return self._parts[0]

    @property
    def raw_path(self) -> str:
        return self._parts[1]

    @cached_property
    def path(self) -> str:
        raw_path = self.raw_path
        try:
            return _unescape_path(raw_path)
        except ValueError:
            logger.debug("Keeping undecoded request path %r", raw_path)
            return raw_path

    @property
    def protocol(self) -> str:
        return self._parts[2]

    def __str__(self) -> str:
        return self.raw


@dataclass
class AccessLogEntry:
    """One access log line. Fields absent from the log format keep their defaults."""

    remote_ip_addr: str = ""          # %a
    local_ip_addr: str = ""           # %A
    response_size: int = 0            # %B / %b, bytes excluding headers
    cookies: dict[str, str] = field(default_factory=dict)
    elapsed_time: int = 0             # %D, microseconds
    env_vars: dict[str, str] = field(default_factory=dict)
    filename: str = ""                # %f
    remote_host: str = ""             # %h
    request_proto: str = ""           # %H
    remote_logname: str = ""          # %l, "-" when not supplied
    request_method: str = ""          # %m
    port: str = ""                    # %p
    process_id: int = 0               # %P
    query_string: str = ""            # %q, leading "?" kept
    request_first_line: RequestFirstLine = field(default_factory=RequestFirstLine)
    status: str = ""                  # %s
    time: datetime | None = None      # %t
    elapsed_time_sec: int = 0         # %T
    remote_user: str = ""             # %u
    url_path: str = ""                # %U, no query string
    canonical_server_name: str = ""   # %v
    server_name: str = ""             # %V
    bytes_received: int = 0           # %I, including request and headers
    bytes_sent: int = 0               # %O, including headers
    headers: dict[str, str] = field(default_factory=dict)


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, RequestFirstLine):
        return {
            "raw": value.raw,
            "method": value.method,
            "path": value.path,
            "protocol": value.protocol,
        }
    if isinstance(value, dict):
        return dict(value)
    return value


def entry_to_dict(entry: AccessLogEntry, fields: tuple[str, ...] | None = None) -> dict[str, Any]:
    """Convert an AccessLogEntry to a JSON-ready dict.

    When *fields* is given, only those attributes are kept, in that order.
    """
    names = fields if fields is not None else tuple(f.name for f in dataclass_fields(entry))
    return {name: _jsonable(getattr(entry, name)) for name in names}
