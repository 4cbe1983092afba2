"""Tests for accesslog/cli.py argument handling and exit behaviour."""

import unittest
from argparse import ArgumentTypeError
from unittest import mock

from accesslog import cli


class TestPositiveInt(unittest.TestCase):
    def test_accepts_positive(self):
        self.assertEqual(cli._positive_int("3"), 3)

    def test_rejects_zero_and_negative(self):
        for value in ("0", "-1"):
            with self.subTest(value=value):
                with self.assertRaises(ArgumentTypeError):
                    cli._positive_int(value)

    def test_rejects_non_integer(self):
        with self.assertRaises(ArgumentTypeError):
            cli._positive_int("ten")


class TestMainExit(unittest.TestCase):
    """main() turns Ctrl-C and a closed pipe into a clean exit."""

    def _main_with(self, error):
        with mock.patch.object(cli, "run_pipeline", side_effect=error), \
                mock.patch.object(cli, "load_config", return_value=cli.Config()), \
                mock.patch("sys.stdout") as stdout, \
                mock.patch.object(cli.os, "open", return_value=99), \
                mock.patch.object(cli.os, "dup2") as dup2:
            stdout.fileno.return_value = 1
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["access.log"])
        return ctx.exception.code, dup2

    def test_keyboard_interrupt(self):
        code, dup2 = self._main_with(KeyboardInterrupt)
        self.assertEqual(code, 0)
        dup2.assert_not_called()

    def test_broken_pipe(self):
        code, dup2 = self._main_with(BrokenPipeError)
        self.assertEqual(code, 0)
        dup2.assert_called_once_with(99, 1)


if __name__ == "__main__":
    unittest.main()
