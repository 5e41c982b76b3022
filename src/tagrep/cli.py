"""CLI entry point for tagrep: I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Final

from tagrep import TagrepError
from tagrep.criteria import MatchCriteria, normalize_extensions
from tagrep.filter import PatternFilter
from tagrep.formatter import format_plain
from tagrep.scanner import ScanOptions, SearchResult, search

EXIT_OK: Final[int] = 0
EXIT_ERROR: Final[int] = 1
EXIT_PARTIAL: Final[int] = 2


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``tagrep`` command.
    """
    parser = argparse.ArgumentParser(
        prog="tagrep",
        description="search directories for audio files by ID3 tag fields",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        metavar="path",
        help="Directories to search",
    )

    # match criteria
    parser.add_argument("--artist", default="", help="match artist")
    parser.add_argument("--title", default="", help="match title")
    parser.add_argument("--year", default="", help="match year")
    parser.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        dest="ignore_case",
        help="Compare fields case-insensitively",
    )
    parser.add_argument(
        "-e",
        "--exts",
        default="*",
        help="Comma separated extension allow-list (default: *, any extension)",
    )

    # traversal
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Search sub-directories too",
    )
    parser.add_argument(
        "-I",
        "--exclude",
        action="append",
        default=[],
        dest="patterns",
        help="Skip paths matching a gitignore-style pattern, relative to each root (repeatable)",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        dest="fail_fast",
        help="Abort the whole run on the first unreadable directory",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        dest="max_workers",
        help="Number of worker threads",
    )

    # output
    parser.add_argument(
        "--abs",
        action="store_true",
        dest="absolute",
        help="Print absolute paths",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Report skipped files and their errors on stderr",
    )
    return parser


def _build_criteria(args: argparse.Namespace) -> MatchCriteria:
    """Translate parsed args into match criteria.

    Raises:
        TagrepError: If no field constraint was given.
    """
    criteria = MatchCriteria(
        artist=args.artist,
        title=args.title,
        year=args.year,
        ignore_case=args.ignore_case,
        extensions=normalize_extensions(args.exts),
        recursive=args.recursive,
    )
    if criteria.is_empty():
        raise TagrepError("at least one of --artist, --title or --year is required")
    return criteria


def _build_options(args: argparse.Namespace) -> ScanOptions:
    if args.max_workers is not None and args.max_workers < 1:
        raise TagrepError("--jobs must be a positive integer")
    return ScanOptions(
        absolute=args.absolute,
        fail_fast=args.fail_fast,
        max_workers=args.max_workers,
    )


def _run_with_args(args: argparse.Namespace) -> SearchResult:
    """Run the search for parsed arguments.

    Raises:
        TagrepError: On invalid configuration or a fail-fast abort.
    """
    criteria = _build_criteria(args)
    options = _build_options(args)
    exclude_filter = PatternFilter(args.patterns) if args.patterns else None
    return search(args.paths, criteria, options, exclude_filter)


def run_tagrep(argv: list[str] | None = None) -> SearchResult:
    """Run tagrep with provided CLI args and return the search result.

    This function writes nothing and is the primary test target for CLI
    behavior.

    Args:
        argv: Command-line argument list without program name.

    Returns:
        SearchResult: Aggregated counters, matches and errors.

    Raises:
        TagrepError: On invalid configuration or a fail-fast abort.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_with_args(args)


def exit_code_for(result: SearchResult) -> int:
    return EXIT_OK if result.ok else EXIT_PARTIAL


def main(argv: list[str] | None = None) -> None:
    """Run the CLI entry point with process arguments.

    Matches and the summary go to stdout, diagnostics to stderr.
    Exits with code 1 on user-facing errors and 2 when some directories
    could not be read.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
    )

    try:
        result = _run_with_args(args)
    except TagrepError as exc:
        sys.stderr.write(f"tagrep: {exc}\n")
        sys.exit(EXIT_ERROR)

    sys.stdout.write(format_plain(result) + "\n")
    sys.exit(exit_code_for(result))
