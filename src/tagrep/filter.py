"""Entry filtering: size/extension eligibility and pattern exclusion."""

from __future__ import annotations

import os

from pathspec import GitIgnoreSpec

from tagrep.criteria import MIN_TAG_SIZE, WILDCARD, MatchCriteria


def _extension(name: str) -> str:
    return os.path.splitext(name)[1].lstrip(".").lower()


class EntryFilter:
    """Decide whether a non-directory entry is worth opening.

    Pure predicate: no I/O, no state besides its configuration.
    """

    def __init__(
        self,
        extensions: frozenset[str] | None = None,
        min_size: int = MIN_TAG_SIZE,
    ) -> None:
        """Initialize entry filter.

        Args:
            extensions: Normalized extension allow-list. ``None`` or a set
                containing ``"*"`` accepts every extension.
            min_size: Minimum file size in bytes.
        """
        self._extensions = extensions or frozenset({WILDCARD})
        self._accept_all = WILDCARD in self._extensions
        self._min_size = min_size

    @classmethod
    def from_criteria(cls, criteria: MatchCriteria) -> EntryFilter:
        return cls(criteria.extensions, criteria.min_size)

    def is_eligible(self, name: str, size: int) -> bool:
        """Return whether an entry passes both size and extension checks.

        Args:
            name: Entry basename.
            size: Entry size in bytes.

        Returns:
            bool: ``True`` when the entry should be handed to the matcher.
        """
        if size < self._min_size:
            return False
        return self._accept_all or _extension(name) in self._extensions


class PatternFilter:
    """Exclude entries by gitignore-style patterns.

    Implements ``-I PATTERN`` exclusion behavior. Patterns are matched
    against the entry path relative to its scan root, so both ``*.m3u``
    and ``albums/lean/`` work. Directories get a trailing slash so
    ``dir/`` patterns only hit directories.
    """

    def __init__(self, patterns: list[str] | None = None) -> None:
        """Initialize pattern filter.

        Args:
            patterns: Optional gitignore-style pattern list.
        """
        self._patterns: list[str] = list(patterns) if patterns else []
        self._spec = GitIgnoreSpec.from_lines(self._patterns)

    def should_exclude(self, rel_path: str, is_dir: bool) -> bool:
        """Return whether an entry should be excluded.

        Args:
            rel_path: Entry path relative to the scan root, ``/`` separated.
            is_dir: Whether the entry is a directory.

        Returns:
            bool: ``True`` when any configured pattern matches.
        """
        if not self._patterns:
            return False
        return self._spec.match_file(rel_path + "/" if is_dir else rel_path)
