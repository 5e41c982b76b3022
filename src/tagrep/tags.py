"""ID3 tag reader adapter over mutagen, plus a run-scoped handle pool."""

from __future__ import annotations

import queue
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import BinaryIO, Final

from mutagen import MutagenError
from mutagen.id3 import ID3, Frames, Frames_2_2, ID3NoHeaderError

# Read order: the first frame present wins.
_FIELD_FRAMES: Final[dict[str, tuple[str, ...]]] = {
    "artist": ("TPE1",),
    "title": ("TIT2",),
    "year": ("TDRC", "TYER"),
}

# Frames that must be parsed for a field, including v2.2 ids and the
# pieces mutagen merges into TDRC when upgrading a v2.3 tag.
_PARSE_FRAMES: Final[dict[str, tuple[str, ...]]] = {
    "artist": ("TPE1", "TP1"),
    "title": ("TIT2", "TT2"),
    "year": ("TDRC", "TYER", "TDAT", "TIME", "TYE", "TDA", "TIM"),
}


class TagError(Exception):
    """Base class for tag reading failures."""


class TagNotFoundError(TagError):
    """The stream carries no ID3 tag."""


class TagReadError(TagError):
    """The stream carries a tag that could not be parsed."""


def known_frames_for(fields: Iterable[str]) -> dict[str, type] | None:
    """Return the mutagen ``known_frames`` mapping for the given fields.

    Args:
        fields: Field names (``artist``, ``title``, ``year``).

    Returns:
        dict[str, type] | None: Frame id to frame class, or ``None`` to
        parse every frame when no field is requested.
    """
    known: dict[str, type] = {}
    for field in fields:
        for frame_id in _PARSE_FRAMES[field]:
            frame_cls = Frames.get(frame_id) or Frames_2_2.get(frame_id)
            if frame_cls is not None:
                known[frame_id] = frame_cls
    return known or None


class TagHandle:
    """Reusable tag structure.

    A handle is reset from a new stream for every file so one instance
    can serve many files over its lifetime.
    """

    def __init__(self) -> None:
        self._id3 = ID3()

    def reset(self, fileobj: BinaryIO, fields: Iterable[str] = ()) -> None:
        """Drop previous state and load the tag found in *fileobj*.

        Args:
            fileobj: Binary stream positioned anywhere; it is rewound.
            fields: Fields to parse. Other frames are left unparsed.

        Raises:
            TagNotFoundError: If the stream has no ID3 tag.
            TagReadError: If the tag is present but unreadable.
        """
        self._id3.clear()
        fileobj.seek(0)
        try:
            self._id3.load(fileobj, known_frames=known_frames_for(fields))
        except ID3NoHeaderError as exc:
            raise TagNotFoundError(str(exc)) from exc
        except (MutagenError, ValueError) as exc:
            raise TagReadError(str(exc) or "unreadable ID3 tag") from exc

    def has_frames(self) -> bool:
        return len(self._id3.keys()) > 0

    def _text(self, field: str) -> str:
        for frame_id in _FIELD_FRAMES[field]:
            frame = self._id3.get(frame_id)
            if frame is not None and frame.text:
                return str(frame.text[0])
        return ""

    def field(self, name: str) -> str:
        """Return the text of a named field, empty when absent."""
        return self._text(name)

    def artist(self) -> str:
        return self._text("artist")

    def title(self) -> str:
        return self._text("title")

    def year(self) -> str:
        return self._text("year")


def open_tag_reader(fileobj: BinaryIO, fields: Iterable[str] = ()) -> TagHandle:
    """Create a handle and load the tag from *fileobj*.

    Raises:
        TagNotFoundError: If the stream has no ID3 tag.
        TagReadError: If the tag is present but unreadable.
    """
    handle = TagHandle()
    handle.reset(fileobj, fields)
    return handle


class TagPool:
    """Pool of reusable tag handles scoped to one run.

    ``acquire`` never blocks: an empty pool allocates a fresh handle.
    """

    def __init__(self) -> None:
        self._free: queue.SimpleQueue[TagHandle] = queue.SimpleQueue()

    def acquire(self) -> TagHandle:
        try:
            return self._free.get_nowait()
        except queue.Empty:
            return TagHandle()

    def release(self, handle: TagHandle) -> None:
        self._free.put(handle)

    @contextmanager
    def borrow(self) -> Iterator[TagHandle]:
        """Lend a handle for the duration of a ``with`` block."""
        handle = self.acquire()
        try:
            yield handle
        finally:
            self.release(handle)

    def __len__(self) -> int:
        return self._free.qsize()
