"""Exception hierarchy for format compilation and line parsing."""


class AccessLogError(Exception):
    """Base class for every error raised by the accesslog package."""


class UnsupportedFormatError(AccessLogError):
    """Raised when a format string holds a directive the registry does not know."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"{token!r} format is not supported")


class ParseError(AccessLogError):
    """Raised when a log line does not match the compiled format.

    The parser fills in ``line_number`` and ``line`` before re-raising.
    """

    line_number: int | None = None
    line: str | None = None


class UnexpectedCharError(ParseError):
    def __init__(self, got: str, want: str):
        self.got = got
        self.want = want
        shown = repr(got) if got else "end of line"
        super().__init__(f"got {shown}, want {want}")


class ExpectedDigitError(UnexpectedCharError):
    def __init__(self, got: str):
        super().__init__(got, "digit between 0 and 9")


class MissingClosingQuoteError(ParseError):
    def __init__(self):
        super().__init__("missing closing quote")


class MissingClosingBracketError(ParseError):
    def __init__(self):
        super().__init__("missing closing ']'")


class DateTimeFormatError(ParseError):
    """The bracketed timestamp does not follow the Apache layout."""


class MalformedResponseSizeError(ParseError):
    """A %b value that is neither '-' nor an integer."""


class IntegerRangeError(ParseError):
    """An integer field that does not fit in a signed 64-bit value."""
