"""Shared fixtures for tagrep tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from mutagen.id3 import ID3, TDRC, TIT2, TPE1

# Stand-in for audio data behind the tag.
_PAYLOAD = b"\x00" * 64


def write_tagged(
    path: Path,
    *,
    artist: str | None = None,
    title: str | None = None,
    year: str | None = None,
) -> Path:
    """Write a small file carrying an ID3v2.4 tag with the given fields."""
    path.write_bytes(_PAYLOAD)
    tags = ID3()
    if artist is not None:
        tags.add(TPE1(encoding=3, text=[artist]))
    if title is not None:
        tags.add(TIT2(encoding=3, text=[title]))
    if year is not None:
        tags.add(TDRC(encoding=3, text=[year]))
    tags.save(str(path), padding=lambda info: 0)
    return path


def write_untagged(path: Path, size: int = 128) -> Path:
    """Write a file with no ID3 tag at all."""
    path.write_bytes(b"\xff" * size)
    return path


@pytest.fixture
def music_tree(tmp_path: Path) -> Path:
    """Create a standard test library.

    Structure::

        root/
        ├── albums/
        │   ├── lean/
        │   │   └── kyoto.mp3        (Yung Lean, Kyoto, 2013)
        │   └── other.mp3            (Bladee, Be Nice 2 Me, 2016)
        ├── ginseng.mp3              (Yung Lean, Ginseng Strip 2002, 2013)
        ├── notes.txt                (no tag)
        └── tiny.mp3                 (10 bytes)
    """
    (tmp_path / "albums" / "lean").mkdir(parents=True)
    write_tagged(
        tmp_path / "albums" / "lean" / "kyoto.mp3",
        artist="Yung Lean",
        title="Kyoto",
        year="2013",
    )
    write_tagged(
        tmp_path / "albums" / "other.mp3",
        artist="Bladee",
        title="Be Nice 2 Me",
        year="2016",
    )
    write_tagged(
        tmp_path / "ginseng.mp3",
        artist="Yung Lean",
        title="Ginseng Strip 2002",
        year="2013",
    )
    write_untagged(tmp_path / "notes.txt")
    (tmp_path / "tiny.mp3").write_bytes(b"ID3\x04\x00\x00\x00\x00\x00\x00")
    return tmp_path
