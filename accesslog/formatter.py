"""Output formatters — text, JSON (NDJSON), colorized (ANSI)."""

import json
from typing import Callable

from accesslog.models import AccessLogEntry, entry_to_dict

# ANSI color codes by status class
COLORS = {
    "2": "\033[32m",  # green
    "3": "\033[36m",  # cyan
    "4": "\033[33m",  # yellow
    "5": "\033[31m",  # red
}
RESET = "\033[0m"

TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"

# Record attributes shown on a summary line, in display order
SUMMARY_FIELDS = ("remote_host", "time", "request_first_line", "status", "response_size")


def _time_text(entry: AccessLogEntry) -> str:
    return entry.time.strftime(TIME_FORMAT) if entry.time else "-"


def _summary(entry: AccessLogEntry, fields: tuple[str, ...] | None, status: str) -> str:
    """Join the summary segments the log format fills in.

    With no *fields*, or none of them shown on a summary line, every
    segment is rendered.
    """
    segments = {
        "remote_host": entry.remote_host or "-",
        "time": f"[{_time_text(entry)}]",
        "request_first_line": f"\"{entry.request_first_line}\"",
        "status": status,
        "response_size": str(entry.response_size),
    }
    shown = [name for name in SUMMARY_FIELDS if fields is None or name in fields]
    return " ".join(segments[name] for name in shown or SUMMARY_FIELDS)


def format_text(entry: AccessLogEntry, fields: tuple[str, ...] | None = None) -> str:
    """One summary line: host, time, request line, status, size.

    *fields* drops the segments the log format does not fill in.
    """
    return _summary(entry, fields, entry.status or "-")


def format_json(entry: AccessLogEntry, fields: tuple[str, ...] | None = None) -> str:
    """Return NDJSON — one JSON object per line, compatible with jq.

    *fields* restricts the object to the attributes the log format fills in.
    """
    return json.dumps(entry_to_dict(entry, fields))


def format_color(entry: AccessLogEntry, fields: tuple[str, ...] | None = None) -> str:
    """Return the summary line with the status colored by class."""
    status = entry.status or "-"
    color = COLORS.get(status[:1], "")
    return _summary(entry, fields, f"{color}{status}{RESET}")


def get_formatter(output_format: str = "text", color: bool = False) -> Callable[..., str]:
    """Factory that returns the right formatter based on args."""
    if output_format == "json":
        return format_json
    if color:
        return format_color
    return format_text
