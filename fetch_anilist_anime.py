#!/usr/bin/env python3
"""
Search anime on the AniList GraphQL API and normalize hits into candidates.
Free, no auth required. Rate limit: 90 req/min.

Usage:
    python3 fetch_anilist_anime.py "Mushishi" [--year 2005]
"""

import argparse
import json
import os
import sys
import urllib.error

sys.path.insert(0, os.path.dirname(__file__))
from candidates import Candidate, build_airing_window, describe, format_anime_runtime
from rate_limiter import post_json, anilist_bucket
from utils import strip_html

ANILIST_URL = "https://graphql.anilist.co"

# --- GraphQL Queries ---

SEARCH_ANIME_QUERY = """
query ($search: String, $year: Int) {
  Page(perPage: 5) {
    media(search: $search, type: ANIME, seasonYear: $year) {
      title { romaji english native }
      description(asHtml: true)
      episodes
      seasonYear
      startDate { year month day }
      endDate { year month day }
      coverImage { extraLarge large }
      studios(isMain: true) { nodes { name } }
      genres
      siteUrl
    }
  }
}
"""


def _post(query: str, variables: dict) -> dict:
    """Make AniList GraphQL request via centralized rate limiter."""
    return post_json(ANILIST_URL, {"query": query, "variables": variables}, anilist_bucket)


def search_anime(title: str, year: int | None = None) -> list[dict]:
    """Search AniList for anime by title. Returns raw media list."""
    variables = {"search": title}
    if year:
        variables["year"] = year
    resp = _post(SEARCH_ANIME_QUERY, variables)
    return ((resp.get("data") or {}).get("Page") or {}).get("media") or []


def to_candidate(media: dict, title: str, year: int | None = None) -> Candidate:
    """Normalize one AniList media node."""
    names = media.get("title") or {}
    studios = [n.get("name") for n in (media.get("studios") or {}).get("nodes") or [] if n and n.get("name")]
    start = media.get("startDate") or {}
    cover = media.get("coverImage") or {}
    episodes = media.get("episodes")
    return Candidate(
        title=names.get("romaji") or names.get("english") or names.get("native") or title,
        owner=", ".join(studios) or "Unknown",
        year=media.get("seasonYear") or start.get("year") or year,
        genres=", ".join(media.get("genres") or []),
        synopsis=strip_html(media.get("description") or ""),
        cover_url=cover.get("extraLarge") or cover.get("large") or "",
        source_url=media.get("siteUrl") or "",
        seasons=1,
        episodes=episodes,
        runtime=format_anime_runtime(1, episodes),
        runtime_detail=build_airing_window(media.get("startDate"), media.get("endDate")),
        source="anilist",
    )


def fetch_candidates(title: str, year: int | None = None) -> list[Candidate]:
    """
    AniList candidates with a cover image. Request failures are reported and
    yield no candidates so the caller can fall back to Jikan.
    """
    try:
        media = search_anime(title, year)
    except (urllib.error.URLError, TimeoutError, ValueError) as e:
        print(f"  ⚠ AniList search failed: {e}")
        return []
    candidates = [to_candidate(m, title, year) for m in media if m]
    return [c for c in candidates if c.cover_url]


def main():
    parser = argparse.ArgumentParser(description="Search anime on AniList")
    parser.add_argument("title", help="Search title")
    parser.add_argument("--year", "-y", type=int, help="Season year filter")
    parser.add_argument("--json", action="store_true", help="Dump normalized candidates as JSON")
    args = parser.parse_args()

    print(f"Searching AniList for: {args.title}")
    results = fetch_candidates(args.title, args.year)
    if not results:
        print("No results found.")
        return
    for c in results:
        print(f"  {describe(c)} | {c.runtime} | {c.source_url}")
    if args.json:
        print(json.dumps([c.to_dict() for c in results], indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
