"""accesslog — parse Apache/Nginx access logs with a mod_log_config format."""

import logging
import os
import sys
from argparse import ArgumentParser, ArgumentTypeError
from itertools import islice
from typing import Iterable, Iterator

from accesslog.config import LOG_LEVELS, OUTPUT_FORMATS, Config, load_config, load_yaml_config
from accesslog.errors import AccessLogError, ParseError
from accesslog.format import ErrorOrder, ExtractionChain, compile_format
from accesslog.formatter import get_formatter
from accesslog.models import AccessLogEntry
from accesslog.parser import PRESETS, Parser, resolve_format
from accesslog.reader import expand_paths, read_lines, tail_file

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="accesslog",
        description="Parse web server access logs written with a mod_log_config format.",
    )
    parser.add_argument(
        "files",
        nargs="+",
        help="Log file path(s) or glob pattern(s)",
    )
    parser.add_argument(
        "--format",
        help=f"Preset name ({', '.join(PRESETS)}) or a format string (default: combined)",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--color",
        action="store_true",
        help="Colorize the status code (ANSI)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show statistics instead of log entries",
    )
    parser.add_argument(
        "--lines",
        type=_positive_int,
        help="Limit output to N entries (N >= 1)",
    )
    parser.add_argument(
        "--tail",
        action="store_true",
        help="Follow a log file for new entries (like tail -f)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first malformed line instead of skipping it",
    )
    parser.add_argument(
        "--error-order",
        choices=[o.value for o in ErrorOrder],
        help="Which unsupported directive to report first (default: right-to-left)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Diagnostic log level on stderr (default: INFO)",
    )
    return parser


class MalformedLineCounter:
    """Counts lines skipped because they did not match the format."""

    def __init__(self):
        self.count = 0

    def record(self, path: str, error: ParseError):
        self.count += 1
        logger.warning("%s:%s: skipping malformed line: %s", path, error.line_number, error)


def parse_sources(sources: Iterable[tuple[str, Iterable[str]]], chain: ExtractionChain,
                  strict: bool, malformed: MalformedLineCounter) -> Iterator[AccessLogEntry]:
    """Yield entries from each (path, lines) source, one Parser per source.

    In strict mode the first ParseError propagates; otherwise it is counted
    and the line skipped.
    """
    for path, lines in sources:
        parser = Parser(lines, chain)
        while True:
            try:
                entry = parser.parse()
            except ParseError as e:
                if strict:
                    raise
                malformed.record(path, e)
                continue
            if entry is None:
                break
            yield entry
        logger.debug("%s: read %d line(s)", path, parser.line_number)


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def run_pipeline(args, config: Config):
    """Assemble and execute the generator pipeline."""
    # Validate incompatible combos
    if args.tail and args.stats:
        _fail("--tail and --stats cannot be used together")

    if args.tail and len(args.files) > 1:
        _fail("--tail requires a single file")

    try:
        chain = compile_format(resolve_format(config.log_format), config.error_order)
        paths = expand_paths(args.files)
    except (AccessLogError, FileNotFoundError) as e:
        _fail(str(e))

    logger.info("Format: %s", chain)

    if args.tail:
        sources = [(paths[0], tail_file(paths[0]))]
    else:
        sources = ((path, read_lines(path)) for path in paths)

    malformed = MalformedLineCounter()
    entries = parse_sources(sources, chain, config.strict, malformed)

    try:
        # Stats mode
        if args.stats:
            from accesslog.stats import compute_stats, format_stats_text, format_stats_json
            stats = compute_stats(entries)
            stats.malformed_lines = malformed.count
            if config.output == "json":
                print(format_stats_json(stats))
            else:
                print(format_stats_text(stats))
            return

        # Limit
        if args.lines is not None:
            entries = islice(entries, args.lines)

        formatter = get_formatter(output_format=config.output, color=config.color)
        fields = chain.fields
        emitted = 0
        for entry in entries:
            print(formatter(entry, fields))
            emitted += 1
    except ParseError as e:
        _fail(f"line {e.line_number}: {e}")

    logger.info("Done: %d entries, %d malformed line(s) skipped", emitted, malformed.count)


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level or "INFO",
        format="%(asctime)s [ACCESSLOG] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args, load_yaml_config(args.config))
    except ValueError as e:
        _fail(str(e))
    logging.getLogger().setLevel(config.log_level)

    try:
        run_pipeline(args, config)
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        # Downstream closed early (e.g. `| head`); silence the flush at exit
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(0)


if __name__ == "__main__":
    main()
