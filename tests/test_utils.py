"""Tests for shared helpers."""

import re

import pytest

from utils import (
    data_file,
    inline_targets,
    list_slugs,
    parse_float,
    slugify,
    strip_html,
    utc_timestamp,
)


class TestSlugify:
    """Tests for slugify."""

    def test_basic(self):
        assert slugify("My Dress-Up Darling") == "my-dress-up-darling"

    def test_punctuation_runs_collapse(self):
        assert slugify("Re:Zero -Starting Life in Another World-") == "re-zero-starting-life-in-another-world"

    def test_case_and_punctuation_variants_share_a_slug(self):
        assert slugify("Fate/Zero") == slugify("fate zero") == slugify("FATE -- ZERO!")

    def test_unicode_folds_to_ascii(self):
        assert slugify("Pokémon: The First Movie") == "pokemon-the-first-movie"

    @pytest.mark.parametrize("title", [
        "Mushishi",
        "Cowboy Bebop: The Movie",
        "  --Odd  spacing--  ",
        "Sousou no Frieren (2023)",
        "K-On!!",
    ])
    def test_idempotent(self, title):
        once = slugify(title)
        assert slugify(once) == once

    @pytest.mark.parametrize("title", ["", None, "!!!", "進撃の巨人"])
    def test_empty_falls_back(self, title):
        assert slugify(title) == "entry"

    def test_distinct_titles_stay_distinct(self):
        assert slugify("Clannad") != slugify("Clannad After Story")


class TestStripHtml:
    """Tests for strip_html."""

    def test_breaks_and_tags(self):
        text = "Line one<br>Line two<br/><i>italic</i> &amp; more&nbsp;text"
        assert strip_html(text) == "Line one\nLine two\nitalic & more text"

    def test_quotes(self):
        assert strip_html("&quot;Hi&quot; it&#39;s me") == "\"Hi\" it's me"

    def test_empty(self):
        assert strip_html(None) == ""
        assert strip_html("") == ""


class TestParseFloat:
    """Tests for parse_float."""

    @pytest.mark.parametrize("value,expected", [
        ("8.5", 8.5),
        ("8.5/10", 8.5),
        (" 7 ", 7.0),
        (9, 9.0),
        (".5", 0.5),
        ("-2", -2.0),
    ])
    def test_numbers(self, value, expected):
        assert parse_float(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, "", "great", "TBD", True])
    def test_not_numbers(self, value):
        assert parse_float(value) is None


def test_utc_timestamp_format():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_timestamp())


class TestSitePaths:
    """Tests for site layout helpers."""

    def test_data_files(self, site):
        assert data_file("anime") == site / "data" / "anime.json"
        assert data_file("album") == site / "data" / "albums.json"

    def test_inline_targets(self, site):
        assert inline_targets("anime") == [
            (site / "index.html", "anime-data-inline"),
            (site / "anime" / "all-anime.html", "anime-archive-data"),
        ]
        assert inline_targets("album")[1] == (site / "album" / "all-album.html", "album-archive-data")

    def test_list_slugs_only_directories(self, site):
        (site / "anime" / "zeta").mkdir()
        (site / "anime" / "alpha").mkdir()
        assert list_slugs("anime") == ["alpha", "zeta"]

    def test_list_slugs_missing_dir(self, site, monkeypatch):
        monkeypatch.setenv("KAWAII_ROOT", str(site / "nowhere"))
        assert list_slugs("album") == []
