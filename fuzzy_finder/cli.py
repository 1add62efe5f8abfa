"""Command-line front door for fuzzy_finder.

Collects candidate lines from arguments, a file or piped stdin, runs the
interactive search on the controlling terminal and prints the pick.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from loguru import logger

from .config import LOG_LEVELS, load_finder_config
from .errors import FinderConfigError, TerminalSessionError
from .logger import setup_logger
from .session import find

CONTROLLING_TTY = "/dev/tty"

EXIT_SELECTED = 0
EXIT_NO_SELECTION = 1
EXIT_ERROR = 2


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def read_labels(args: argparse.Namespace) -> list[str]:
    """Resolve candidate labels from positional items, ``--file`` or stdin.

    Blank lines are dropped because they cannot be told apart on screen.
    """
    if args.items:
        return list(args.items)
    if args.file is not None:
        text = args.file.read_text(encoding="utf-8", errors="replace")
    elif not sys.stdin.isatty():
        text = sys.stdin.read()
    else:
        return []
    return [line for line in text.splitlines() if line.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fuzzy-finder",
        description="Fuzzy-search a list of items in the terminal and print the one you pick.",
    )
    parser.add_argument("items", nargs="*", help="Items to search. Defaults to lines of --file or piped stdin.")
    parser.add_argument("-f", "--file", type=Path, default=None, help="Read items from PATH, one per line.")
    parser.add_argument(
        "-n",
        "--number",
        type=_positive_int,
        default=None,
        help="Number of result rows to show (default: config 'rows', 7).",
    )
    parser.add_argument("--index", action="store_true", help="Print the 0-based index of the pick instead of its text.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level for the log file (default: config 'log_level', WARNING).",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to PATH instead of the user log dir.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the finder and return the process exit code.

    Exit codes: 0 when something was picked (printed on stdout), 1 when the
    search was cancelled, 2 on configuration or terminal errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_finder_config()

    try:
        setup_logger(args.log_file, args.log_level or config.log_level)
    except OSError:
        # An unwritable log location only costs diagnostics.
        pass

    if args.file is not None and not args.file.is_file():
        print(f"fuzzy-finder: file not found: {args.file}", file=sys.stderr)
        return EXIT_ERROR
    labels = read_labels(args)
    rows = args.number if args.number is not None else config.rows

    tty_fd: int | None = None
    try:
        if not (sys.stdin.isatty() and sys.stdout.isatty()):
            # Items or the result travel through pipes; talk to the terminal directly.
            try:
                tty_fd = os.open(CONTROLLING_TTY, os.O_RDWR)
            except OSError as exc:
                raise TerminalSessionError(f"cannot open {CONTROLLING_TTY}: {exc}") from exc
        picked = find(
            ((label, idx) for idx, label in enumerate(labels)),
            rows,
            config=config,
            stdin_fd=tty_fd,
            stdout_fd=tty_fd,
            require_items=True,
        )
    except (FinderConfigError, TerminalSessionError) as exc:
        logger.error("Finder failed: {}", exc)
        print(f"fuzzy-finder: {exc}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        if tty_fd is not None:
            os.close(tty_fd)

    if picked is None:
        return EXIT_NO_SELECTION
    print(picked if args.index else labels[picked])
    return EXIT_SELECTED


if __name__ == "__main__":
    raise SystemExit(main())
