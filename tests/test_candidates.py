"""Tests for the candidate record and runtime labels."""

import pytest

from candidates import (
    Candidate,
    build_airing_window,
    describe,
    format_album_runtime,
    format_anime_runtime,
    format_date_label,
)


class TestFormatAlbumRuntime:
    """Tests for format_album_runtime."""

    @pytest.mark.parametrize("minutes,expected", [
        (None, ""),
        (0, ""),
        (-4, ""),
        (48.2, "48 mins"),
        (42.5, "43 mins"),
        (59.6, "1 hr"),
        (60, "1 hr"),
        (65, "1 hr 05 mins"),
        (125, "2 hrs 05 mins"),
        (180, "3 hrs"),
    ])
    def test_labels(self, minutes, expected):
        assert format_album_runtime(minutes) == expected


class TestFormatAnimeRuntime:
    """Tests for format_anime_runtime."""

    def test_both(self):
        assert format_anime_runtime(1, 12) == "1 Season × 12 Episodes"

    def test_plurals(self):
        assert format_anime_runtime(2, 1) == "2 Seasons × 1 Episode"

    def test_seasons_only(self):
        assert format_anime_runtime(3, None) == "3 Seasons"

    def test_episodes_only(self):
        assert format_anime_runtime(None, 24) == "24 Episodes"

    def test_neither(self):
        assert format_anime_runtime(None, 0) == ""


class TestAiringWindow:
    """Tests for date labels and airing windows."""

    def test_date_label(self):
        assert format_date_label({"year": 2019, "month": 4, "day": 6}) == "Apr 2019"
        assert format_date_label({"year": 2019, "month": None}) == "2019"
        assert format_date_label({"year": None}) == ""
        assert format_date_label(None) == ""

    def test_closed_window(self):
        start = {"year": 2019, "month": 4}
        end = {"year": 2019, "month": 9}
        assert build_airing_window(start, end) == "Aired Apr 2019 – Sep 2019"

    def test_open_window(self):
        assert build_airing_window({"year": 2023, "month": 10}, {"year": None}) == "Aired Oct 2023 – Present"

    def test_no_start(self):
        assert build_airing_window({}, {"year": 2020}) == ""


class TestDescribe:
    """Tests for the chooser summary line."""

    def test_with_year(self):
        assert describe(Candidate(title="Mushishi", owner="Artland", year=2005)) == "Mushishi (2005) by Artland"

    def test_without_year(self):
        assert describe(Candidate(title="Kid A", owner="Radiohead")) == "Kid A (n/a) by Radiohead"


def test_to_dict_round_trips_fields():
    c = Candidate(title="Frieren", episodes=28, source="jikan")
    d = c.to_dict()
    assert d["title"] == "Frieren"
    assert d["episodes"] == 28
    assert d["owner"] == "Unknown"
    assert Candidate(**d) == c
