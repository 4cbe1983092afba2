"""Shared pytest fixtures for the accesslog test suite."""

import pytest

from accesslog.format import compile_format
from accesslog.parser import COMBINED_LOG_FORMAT, COMMON_LOG_FORMAT

COMMON_LINE = (
    '127.0.0.1 - - [12/Dec/2016:10:57:30 +0100] "GET /a HTTP/1.1" 200 50122\n'
)
COMBINED_LINE = (
    '127.0.0.1 - - [12/Dec/2016:10:57:30 +0100] "GET /assets/img/logo.jpg HTTP/1.1" '
    '200 50122 "http://127.0.0.1" "Mozilla/5.0 (Windows NT 10.0; WOW64)"\n'
)


@pytest.fixture()
def common_line() -> str:
    return COMMON_LINE


@pytest.fixture()
def combined_line() -> str:
    return COMBINED_LINE


@pytest.fixture()
def common_chain():
    return compile_format(COMMON_LOG_FORMAT)


@pytest.fixture()
def combined_chain():
    return compile_format(COMBINED_LOG_FORMAT)
