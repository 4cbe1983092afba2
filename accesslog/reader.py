"""Line sources — access log files, rotated-log filtering, and tail."""

import glob
import logging
import os
import threading
import time
from typing import Generator

logger = logging.getLogger(__name__)

# Rotated logs that logrotate has already compressed; not text.
COMPRESSED_SUFFIXES = (".gz", ".bz2", ".xz", ".zip")


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each line of *filepath*, newline included.

    Bytes that are not valid UTF-8 (Latin-1 user agents, binary junk in a
    request line) decode to U+FFFD, so such a line parses or is skipped as
    malformed like any other.
    """
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        yield from f


def _is_compressed(path: str) -> bool:
    return path.lower().endswith(COMPRESSED_SUFFIXES)


def expand_paths(raw_paths: list[str]) -> list[str]:
    """Expand globs into the access log files to read, in order, once each.

    Compressed rotations (access.log.2.gz) are skipped with a warning.
    Raises FileNotFoundError if a non-glob path doesn't exist, or if
    nothing readable is left.
    """
    expanded = []
    seen = set()

    for raw in raw_paths:
        if glob.has_magic(raw):
            candidates = sorted(p for p in glob.glob(raw) if os.path.isfile(p))
        elif os.path.isfile(raw):
            candidates = [raw]
        else:
            raise FileNotFoundError(f"File not found: {raw}")

        for path in candidates:
            if path in seen:
                continue
            seen.add(path)
            if _is_compressed(path):
                logger.warning("%s: skipping compressed log file", path)
                continue
            expanded.append(path)

    if not expanded:
        raise FileNotFoundError("No log files found matching the given paths")

    return expanded


def _decode(raw: bytes) -> str:
    if raw.endswith(b"\r\n"):
        raw = raw[:-2] + b"\n"
    return raw.decode("utf-8", errors="replace")


def tail_file(filepath: str, poll_interval: float = 0.1,
              stop: threading.Event | None = None) -> Generator[str, None, None]:
    """Follow *filepath* from its current end, yielding lines as they are completed.

    A line is held back until its "\\n" arrives. When *stop* is set, any
    unterminated tail is yielded without a newline, which the parser treats
    as a final line, and the generator returns. A file truncated in place
    (copytruncate rotation) is re-read from the start.
    """
    with open(filepath, "rb") as f:
        f.seek(0, os.SEEK_END)
        pending = b""
        while True:
            chunk = f.read()
            if chunk:
                pending += chunk
                *complete, pending = pending.split(b"\n")
                for raw in complete:
                    yield _decode(raw + b"\n")
                continue

            if stop is not None and stop.is_set():
                if pending:
                    yield _decode(pending)
                return

            if os.stat(filepath).st_size < f.tell():
                logger.info("%s: file truncated, reading from the start", filepath)
                f.seek(0)
                pending = b""
                continue

            time.sleep(poll_interval)
