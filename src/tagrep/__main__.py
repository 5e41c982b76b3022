"""CLI entry-point for tagrep.

Usage:
    python -m tagrep [flags] paths...
"""

from tagrep.cli import main

main()
