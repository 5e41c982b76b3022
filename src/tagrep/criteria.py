"""Immutable match configuration captured once before a run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

# ID3v2 header (10 bytes) plus one frame header (10 bytes).
MIN_TAG_SIZE: Final[int] = 20

WILDCARD: Final[str] = "*"

FIELDS: Final[tuple[str, ...]] = ("artist", "title", "year")


def normalize_extensions(raw: str | list[str] | None) -> frozenset[str]:
    """Normalize an extension allow-list.

    Accepts a comma separated string (``"mp3,.FLAC"``) or a list of such
    strings. Leading dots are stripped and names are lowercased.

    Args:
        raw: Extension list as given on the command line.

    Returns:
        frozenset[str]: Normalized extensions; ``{"*"}`` when empty.
    """
    if raw is None:
        return frozenset({WILDCARD})
    items = [raw] if isinstance(raw, str) else list(raw)
    exts: set[str] = set()
    for item in items:
        for part in item.split(","):
            ext = part.strip().lstrip(".").lower()
            if ext:
                exts.add(ext)
    return frozenset(exts) if exts else frozenset({WILDCARD})


@dataclass(frozen=True, slots=True)
class MatchCriteria:
    """What a file must look like to be reported.

    Attributes:
        artist: Required artist, empty for no constraint.
        title: Required title, empty for no constraint.
        year: Required year, empty for no constraint.
        ignore_case: Compare fields case-insensitively.
        extensions: Extension allow-list; ``"*"`` accepts everything.
        recursive: Descend into sub-directories.
        min_size: Files smaller than this are never opened.
    """

    artist: str = ""
    title: str = ""
    year: str = ""
    ignore_case: bool = False
    extensions: frozenset[str] = frozenset({WILDCARD})
    recursive: bool = False
    min_size: int = MIN_TAG_SIZE

    @property
    def fields(self) -> dict[str, str]:
        """Configured field constraints keyed by field name."""
        return {name: getattr(self, name) for name in FIELDS if getattr(self, name)}

    def is_empty(self) -> bool:
        """Return whether no field constraint is configured."""
        return not self.fields
