"""Directive registry — mod_log_config directives <-> field kinds.

Named directives (%{Name}C, %{Name}e, %{Name}i) are registered under a
placeholder form so that any name resolves to the same kind:

  %{Referer}i     → HEADER     (name "Referer")
  %{JSESSIONID}C  → COOKIE     (name "JSESSIONID")
"""

from enum import Enum


class FieldKind(Enum):
    REMOTE_IP_ADDRESS = "%a"
    LOCAL_IP_ADDRESS = "%A"
    RESPONSE_SIZE = "%B"
    RESPONSE_SIZE_CLF = "%b"
    COOKIE = "%{...}C"
    ELAPSED_TIME = "%D"
    ELAPSED_TIME_IN_SEC = "%T"
    ENV_VAR = "%{...}e"
    HEADER = "%{...}i"
    FILENAME = "%f"
    REMOTE_HOST = "%h"
    REQUEST_PROTO = "%H"
    REMOTE_LOGNAME = "%l"
    REQUEST_METHOD = "%m"
    PORT = "%p"
    PROCESS_ID = "%P"
    QUERY_STRING = "%q"
    REQUEST_FIRST_LINE = "%r"
    STATUS = "%s"
    TIME = "%t"
    REMOTE_USER = "%u"
    URL_PATH = "%U"
    CANONICAL_SERVER_NAME = "%v"
    SERVER_NAME = "%V"
    BYTES_RECEIVED = "%I"
    BYTES_SENT = "%O"

    UNKNOWN = "UNKNOWN"  # for errors

    @property
    def is_named(self) -> bool:
        """True for the kinds written as %{Name}x."""
        return self in _NAMED_KINDS

    def __str__(self) -> str:
        return display(self)


_NAMED_KINDS = frozenset({FieldKind.COOKIE, FieldKind.ENV_VAR, FieldKind.HEADER})

# Closing letter of a %{Name}x directive → kind
NAMED_LETTERS = {
    "C": FieldKind.COOKIE,
    "e": FieldKind.ENV_VAR,
    "i": FieldKind.HEADER,
}

_BY_DIRECTIVE: dict[str, FieldKind] = {
    kind.value: kind for kind in FieldKind if kind is not FieldKind.UNKNOWN
}


def lookup(directive: str) -> FieldKind:
    """Resolve an exact directive string to its kind, or FieldKind.UNKNOWN."""
    return _BY_DIRECTIVE.get(directive, FieldKind.UNKNOWN)


def display(kind: FieldKind) -> str:
    """Canonical directive text of *kind* ("UNKNOWN" for the sentinel)."""
    return kind.value


def named_placeholder(letter: str) -> str:
    """Registry key for a named directive ending in *letter*, e.g. 'i' → '%{...}i'."""
    return "%{...}" + letter
