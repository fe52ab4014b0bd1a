#!/usr/bin/env python3
"""
Fuzzy slug matching for "did you mean" hints when a build or delete names a
review that does not exist.

Usage:
    from fuzzy_match import suggest_slugs

    suggest_slugs("frieren", ["sousou-no-frieren", "mushishi"])  # ['sousou-no-frieren']
"""

import re

from rapidfuzz import fuzz, process

DEFAULT_THRESHOLD = 60


def _normalize(s: str) -> str:
    """Lowercase, hyphens and punctuation to spaces."""
    s = s.lower().replace("-", " ")
    s = re.sub(r"[^\w\s]", " ", s)
    return " ".join(s.split())


def suggest_slugs(query: str, slugs: list[str], limit: int = 3,
                  threshold: int = DEFAULT_THRESHOLD) -> list[str]:
    """
    Existing slugs most similar to query, best first.
    threshold: 0-100 similarity score a suggestion must reach.
    """
    if not query or not slugs:
        return []
    matches = process.extract(
        query,
        slugs,
        scorer=fuzz.WRatio,
        processor=_normalize,
        limit=limit,
        score_cutoff=threshold,
    )
    return [slug for slug, _score, _index in matches]


def did_you_mean(query: str, slugs: list[str]) -> str:
    """Hint line for error messages, '' when nothing is close."""
    close = suggest_slugs(query, slugs)
    if not close:
        return ""
    return "Did you mean: " + ", ".join(close) + "?"
