"""Tests for tagrep.filter."""

import pytest

from tagrep.criteria import MIN_TAG_SIZE, MatchCriteria, normalize_extensions
from tagrep.filter import EntryFilter, PatternFilter


class TestEntryFilter:
    def test_default_accepts_any_extension(self) -> None:
        f = EntryFilter()
        assert f.is_eligible("song.mp3", 100) is True
        assert f.is_eligible("README", 100) is True

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, False),
            (MIN_TAG_SIZE - 1, False),
            (MIN_TAG_SIZE, True),
            (MIN_TAG_SIZE * 100, True),
        ],
    )
    def test_size_threshold(self, size: int, expected: bool) -> None:
        assert EntryFilter().is_eligible("song.mp3", size) is expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("song.mp3", True),
            ("SONG.MP3", True),
            ("track.flac", True),
            ("cover.jpg", False),
            ("mp3", False),
            ("archive.mp3.zip", False),
        ],
    )
    def test_extension_allow_list(self, name: str, expected: bool) -> None:
        f = EntryFilter(normalize_extensions("mp3,.flac"))
        assert f.is_eligible(name, 100) is expected

    def test_both_checks_must_pass(self) -> None:
        f = EntryFilter(frozenset({"mp3"}))
        assert f.is_eligible("song.mp3", 5) is False
        assert f.is_eligible("song.ogg", 500) is False

    def test_from_criteria(self) -> None:
        criteria = MatchCriteria(artist="x", extensions=frozenset({"ogg"}), min_size=50)
        f = EntryFilter.from_criteria(criteria)
        assert f.is_eligible("a.ogg", 50) is True
        assert f.is_eligible("a.ogg", 49) is False
        assert f.is_eligible("a.mp3", 500) is False


class TestPatternFilter:
    def test_no_patterns_excludes_nothing(self) -> None:
        f = PatternFilter()
        assert f.should_exclude("foo.mp3", False) is False
        assert f.should_exclude("Podcasts", True) is False

    @pytest.mark.parametrize(
        ("patterns", "name", "is_dir", "expected"),
        [
            (["Podcasts"], "Podcasts", True, True),
            (["Podcasts"], "Albums", True, False),
            (["*.m3u"], "list.m3u", False, True),
            (["*.m3u"], "song.mp3", False, False),
            (["demo_*"], "demo_1.mp3", False, True),
            (["demo_*"], "1_demo.mp3", False, False),
            (["Incoming/"], "Incoming", True, True),
            (["Incoming/"], "Incoming", False, False),
        ],
    )
    def test_pattern_matching(
        self,
        patterns: list[str],
        name: str,
        is_dir: bool,
        expected: bool,
    ) -> None:
        f = PatternFilter(patterns)
        assert f.should_exclude(name, is_dir) is expected

    def test_negated_pattern(self) -> None:
        f = PatternFilter(["*.mp3", "!keep.mp3"])
        assert f.should_exclude("drop.mp3", False) is True
        assert f.should_exclude("keep.mp3", False) is False

    @pytest.mark.parametrize(
        ("rel_path", "is_dir", "expected"),
        [
            ("albums/lean", True, True),
            ("albums", True, False),
            ("other/lean", True, False),
            ("albums/lean", False, False),
        ],
    )
    def test_nested_pattern_matches_relative_path(
        self, rel_path: str, is_dir: bool, expected: bool
    ) -> None:
        f = PatternFilter(["albums/lean/"])
        assert f.should_exclude(rel_path, is_dir) is expected

    def test_unanchored_pattern_matches_at_any_depth(self) -> None:
        f = PatternFilter(["*.m3u", "lean/"])
        assert f.should_exclude("albums/2013/list.m3u", False) is True
        assert f.should_exclude("albums/lean", True) is True
