"""Plain-text rendering of a search result."""

from __future__ import annotations

from typing import Final

from tagrep.scanner import SearchResult

SUMMARY_FORMAT: Final[str] = "%d files total, %d found in %dms"


def format_summary(result: SearchResult) -> str:
    return SUMMARY_FORMAT % (result.total, result.found, result.elapsed_ms)


def format_plain(result: SearchResult) -> str:
    """Render matched paths one per line followed by the summary line.

    Args:
        result: Completed search result.

    Returns:
        str: Rendered output without a trailing newline.
    """
    lines = list(result.matches)
    lines.append(format_summary(result))
    return "\n".join(lines)
