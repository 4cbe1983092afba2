"""Tests for accesslog/readers.py"""

import unittest
from datetime import datetime, timedelta, timezone

from accesslog.errors import (
    DateTimeFormatError,
    ExpectedDigitError,
    IntegerRangeError,
    MalformedResponseSizeError,
    MissingClosingBracketError,
    MissingClosingQuoteError,
    ParseError,
    UnexpectedCharError,
)
from accesslog.readers import (
    extract_from_quotes,
    read_datetime,
    read_int,
    read_response_size_clf,
    read_string,
)

CET = timezone(timedelta(hours=1))


class TestExtractFromQuotes(unittest.TestCase):
    def test_returns_interior_and_closing_offset(self):
        self.assertEqual(extract_from_quotes('"foo" bar'), ("foo", 4))

    def test_from_position(self):
        self.assertEqual(extract_from_quotes('x "foo bar" y', 2), ("foo bar", 8))

    def test_empty_quotes(self):
        self.assertEqual(extract_from_quotes('"" x'), ("", 1))

    def test_missing_closing_quote(self):
        with self.assertRaises(MissingClosingQuoteError) as ctx:
            extract_from_quotes('"foo bar')
        self.assertEqual(str(ctx.exception), "missing closing quote")

    def test_missing_opening_quote(self):
        with self.assertRaises(UnexpectedCharError) as ctx:
            extract_from_quotes('foo" bar')
        self.assertEqual(str(ctx.exception), "got 'f', want quote")


class TestReadString(unittest.TestCase):
    def test_cases(self):
        cases = [
            ("127.0.0.1\n", 0, False, "127.0.0.1", 9),
            ("foo bar", 0, False, "foo", 3),
            ('"foo"', 0, True, "foo", 5),
            ("foobar", 0, False, "foobar", 6),
            ("ab cd", 3, False, "cd", 2),
            ('a "b c" d', 2, True, "b c", 5),
            (" x", 0, False, "", 0),
        ]
        for line, pos, quoted, data, off in cases:
            with self.subTest(line=line, pos=pos, quoted=quoted):
                self.assertEqual(read_string(line, pos, quoted), (data, off))

    def test_quoted_value_keeps_inner_spaces(self):
        data, off = read_string('"Mozilla/5.0 (X11; Linux)" next')
        self.assertEqual(data, '"Mozilla/5.0')
        data, off = read_string('"Mozilla/5.0 (X11; Linux)" next', quoted=True)
        self.assertEqual(data, "Mozilla/5.0 (X11; Linux)")
        self.assertEqual(off, 26)

    def test_quoted_missing_closing_quote(self):
        with self.assertRaises(MissingClosingQuoteError):
            read_string('"GET / HTTP/1.1\n', quoted=True)


class TestReadDateTime(unittest.TestCase):
    def test_bracketed(self):
        value, off = read_datetime("[16/Nov/2016:09:25:05 +0100] foobar")
        self.assertEqual(value, datetime(2016, 11, 16, 9, 25, 5, tzinfo=CET))
        self.assertEqual(value.utcoffset(), timedelta(hours=1))
        self.assertEqual(off, 28)

    def test_quoted_consumes_closing_quote(self):
        value, off = read_datetime('"[16/Nov/2016:09:25:05 +0100]" foobar', quoted=True)
        self.assertEqual(value, datetime(2016, 11, 16, 9, 25, 5, tzinfo=CET))
        self.assertEqual(off, 30)

    def test_negative_offset(self):
        value, _ = read_datetime("[10/Oct/2000:13:55:36 -0700]")
        self.assertEqual(value.utcoffset(), timedelta(hours=-7))
        self.assertEqual(value.astimezone(timezone.utc).hour, 20)

    def test_from_position(self):
        value, off = read_datetime("- [01/Jan/2026:00:00:00 +0000]\n", 2)
        self.assertEqual(value, datetime(2026, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(off, 28)

    def test_missing_opening_bracket(self):
        with self.assertRaises(UnexpectedCharError) as ctx:
            read_datetime("foobar]")
        self.assertEqual(str(ctx.exception), "got 'f', want '['")

    def test_missing_closing_bracket(self):
        with self.assertRaises(MissingClosingBracketError) as ctx:
            read_datetime("[foobar")
        self.assertEqual(str(ctx.exception), "missing closing ']'")

    def test_closing_bracket_outside_quotes_does_not_count(self):
        with self.assertRaises(MissingClosingBracketError):
            read_datetime('"[16/Nov/2016:09:25:05 +0100" ]', quoted=True)

    def test_wrong_layout(self):
        with self.assertRaises(DateTimeFormatError) as ctx:
            read_datetime("[2016-11-16 09:25:05 +0100]")
        self.assertTrue(str(ctx.exception).startswith("failed to parse datetime: "))

    def test_layout_must_be_exact(self):
        for line in (
            "[16/Nov/2016:09:25:05 Z]",
            "[1/Nov/2016:09:25:05 +0100]",
            "[16/Nov/2016:09:5:5 +0100]",
            "[16/Nov/2016:09:25:05 +01:00]",
        ):
            with self.subTest(line=line):
                with self.assertRaises(DateTimeFormatError):
                    read_datetime(line)

    def test_unknown_month(self):
        with self.assertRaises(DateTimeFormatError) as ctx:
            read_datetime("[16/Foo/2016:09:25:05 +0100]")
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_end_of_line(self):
        with self.assertRaises(UnexpectedCharError) as ctx:
            read_datetime("")
        self.assertIn("end of line", str(ctx.exception))


class TestReadInt(unittest.TestCase):
    def test_cases(self):
        cases = [
            ("1234567890 foo", 1234567890, 10),
            ("1234567890foo", 1234567890, 10),
            ("1234567890\n", 1234567890, 10),
            ("0", 0, 1),
        ]
        for line, value, off in cases:
            with self.subTest(line=line):
                self.assertEqual(read_int(line), (value, off))

    def test_not_a_digit(self):
        with self.assertRaises(ExpectedDigitError) as ctx:
            read_int("foo123")
        self.assertEqual(str(ctx.exception), "got 'f', want digit between 0 and 9")

    def test_dash_is_not_a_digit(self):
        with self.assertRaises(ExpectedDigitError):
            read_int("- 200")

    def test_end_of_line(self):
        with self.assertRaises(ExpectedDigitError) as ctx:
            read_int("")
        self.assertEqual(str(ctx.exception), "got end of line, want digit between 0 and 9")

    def test_quoted(self):
        self.assertEqual(read_int('"42" x', quoted=True), (42, 4))

    def test_quoted_with_trailing_garbage(self):
        with self.assertRaises(UnexpectedCharError):
            read_int('"4a" x', quoted=True)

    def test_int64_limits(self):
        self.assertEqual(read_int("9223372036854775807")[0], 2 ** 63 - 1)
        with self.assertRaises(IntegerRangeError):
            read_int("9223372036854775808")


class TestReadResponseSizeCLF(unittest.TestCase):
    def test_dash_is_zero(self):
        self.assertEqual(read_response_size_clf("- \"-\""), (0, 1))

    def test_numeric(self):
        self.assertEqual(read_response_size_clf("50122\n"), (50122, 5))

    def test_signed_integer(self):
        self.assertEqual(read_response_size_clf("-5 x"), (-5, 2))

    def test_non_numeric_is_an_error(self):
        for token in ("abc", "12ab", "--", "1_000", "9223372036854775808"):
            with self.subTest(token=token):
                with self.assertRaises(MalformedResponseSizeError) as ctx:
                    read_response_size_clf(token)
                self.assertIsInstance(ctx.exception, ParseError)
                self.assertTrue(str(ctx.exception).startswith("malformed response size"))


if __name__ == "__main__":
    unittest.main()
