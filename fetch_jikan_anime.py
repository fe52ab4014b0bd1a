#!/usr/bin/env python3
"""
Search anime on Jikan (MyAnimeList API wrapper) and normalize hits into
candidates. Free, no auth required. Rate limit: 3 req/sec, 60 req/min.

Usage:
    python3 fetch_jikan_anime.py "Kimetsu no Yaiba" [--year 2019]
"""

import argparse
import os
import sys
import urllib.error

sys.path.insert(0, os.path.dirname(__file__))
from candidates import Candidate, describe, format_anime_runtime
from rate_limiter import get_json, jikan_bucket
from utils import ReviewError

JIKAN_BASE = "https://api.jikan.moe/v4"


def _get(path: str, params: dict = None) -> dict:
    """Make Jikan API request via centralized rate limiter."""
    return get_json(f"{JIKAN_BASE}{path}", params, jikan_bucket)


def search_anime(title: str, limit: int = 5) -> list[dict]:
    """Search Jikan for anime by title, best scored first."""
    resp = _get("/anime", {"q": title, "limit": limit, "order_by": "score", "sort": "desc"})
    return resp.get("data") or []


def to_candidate(anime: dict, title: str) -> Candidate:
    """Normalize one Jikan anime object."""
    images = (anime.get("images") or {}).get("jpg") or {}
    studios = ", ".join(s["name"] for s in anime.get("studios") or [] if s.get("name"))
    episodes = anime.get("episodes")
    seasons = anime.get("seasons") or 1
    aired = (anime.get("aired") or {}).get("string")
    return Candidate(
        title=anime.get("title") or title,
        owner=studios or "Unknown",
        year=anime.get("year"),
        genres=", ".join(g["name"] for g in anime.get("genres") or [] if g.get("name")),
        synopsis=(anime.get("synopsis") or "").strip(),
        cover_url=images.get("large_image_url") or images.get("image_url") or "",
        source_url=anime.get("url") or "",
        seasons=seasons,
        episodes=episodes,
        runtime=format_anime_runtime(seasons, episodes),
        runtime_detail=f"Aired {aired}" if aired else "",
        source="jikan",
    )


def fetch_candidates(title: str, year: int | None = None) -> list[Candidate]:
    """
    Jikan candidates. When a year is given and some hits match it, only
    those are kept. Request or decode failures raise ReviewError: Jikan is
    the last anime source, so there is nothing to fall back to.
    """
    try:
        results = search_anime(title)
    except urllib.error.HTTPError as e:
        raise ReviewError(f"Jikan API error: {e.code}") from e
    except (OSError, ValueError) as e:
        raise ReviewError(f"Jikan API error: {e}") from e

    if year:
        filtered = [a for a in results if a.get("year") == year]
        if filtered:
            results = filtered
    return [to_candidate(a, title) for a in results]


def main():
    parser = argparse.ArgumentParser(description="Search anime on Jikan/MAL")
    parser.add_argument("title", help="Search title")
    parser.add_argument("--year", "-y", type=int, help="Prefer hits from this year")
    args = parser.parse_args()

    print(f"Searching Jikan for: {args.title}")
    try:
        results = fetch_candidates(args.title, args.year)
    except ReviewError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    if not results:
        print("No results found.")
        return
    for c in results:
        print(f"  {describe(c)} | {c.runtime} | {c.source_url}")


if __name__ == "__main__":
    main()
