"""Per-file tag matching against configured field constraints."""

from __future__ import annotations

from typing import BinaryIO, Protocol

from tagrep.criteria import MatchCriteria
from tagrep.tags import TagPool


class Matcher(Protocol):
    """Protocol for the per-file predicate.

    Keeps scanner logic decoupled from the tag format. Implementations
    return whether the open file matches and raise ``TagError`` when the
    file cannot be read as a tag.
    """

    def matches(self, fileobj: BinaryIO, criteria: MatchCriteria) -> bool: ...


def fields_equal(actual: str, wanted: str, ignore_case: bool) -> bool:
    """Compare two field values.

    Args:
        actual: Value read from the tag.
        wanted: Value from the criteria.
        ignore_case: Use Unicode case folding.

    Returns:
        bool: ``True`` when the values are equal.
    """
    if ignore_case:
        return actual.casefold() == wanted.casefold()
    return actual == wanted


class TagMatcher:
    """Default matcher backed by the ID3 tag reader.

    All configured fields must match; unconfigured fields are ignored.
    Tag handles come from *pool* and always go back to it.
    """

    def __init__(self, pool: TagPool | None = None) -> None:
        self._pool = pool if pool is not None else TagPool()

    def matches(self, fileobj: BinaryIO, criteria: MatchCriteria) -> bool:
        wanted = criteria.fields
        with self._pool.borrow() as tag:
            tag.reset(fileobj, wanted)
            if not tag.has_frames():
                return False
            return all(
                fields_equal(tag.field(name), value, criteria.ignore_case)
                for name, value in wanted.items()
            )
