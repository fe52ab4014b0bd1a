"""Tests for slug suggestions."""

from fuzzy_match import did_you_mean, suggest_slugs

SLUGS = ["sousou-no-frieren", "mushishi", "cowboy-bebop", "in-rainbows", "kid-a"]


def test_typo_suggests_close_slug():
    assert suggest_slugs("mushisi", SLUGS)[0] == "mushishi"


def test_partial_title():
    assert "sousou-no-frieren" in suggest_slugs("frieren", SLUGS)


def test_nothing_close():
    assert suggest_slugs("zzzzqqqq", SLUGS) == []
    assert did_you_mean("zzzzqqqq", SLUGS) == ""


def test_empty_inputs():
    assert suggest_slugs("", SLUGS) == []
    assert suggest_slugs("mushishi", []) == []


def test_hint_line():
    assert did_you_mean("cowboy-bebopp", SLUGS).startswith("Did you mean: cowboy-bebop")
    assert did_you_mean("cowboy-bebopp", SLUGS).endswith("?")
