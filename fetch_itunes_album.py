#!/usr/bin/env python3
"""
Search albums on the iTunes Search API. Last-resort album source: broad
catalogue, but generic genres and no synopsis.

Usage:
    python3 fetch_itunes_album.py "Random Access Memories" --artist "Daft Punk"
"""

import argparse
import os
import sys
import urllib.error

sys.path.insert(0, os.path.dirname(__file__))
from candidates import Candidate, describe, format_album_runtime
from rate_limiter import get_json, itunes_bucket

ITUNES_SEARCH = "https://itunes.apple.com/search"
ITUNES_LOOKUP = "https://itunes.apple.com/lookup"

_FAILURES = (urllib.error.URLError, TimeoutError, ValueError)


def _get(url: str, params: dict) -> dict:
    return get_json(url, params, itunes_bucket)


def _release_year(release_date: str | None) -> int | None:
    if release_date and release_date[:4].isdigit():
        return int(release_date[:4])
    return None


def collection_minutes(collection_id: int) -> float | None:
    """Total track time of a collection in minutes (2 decimals)."""
    try:
        data = _get(ITUNES_LOOKUP, {"id": collection_id, "entity": "song"})
    except _FAILURES:
        return None
    total_ms = sum(
        item.get("trackTimeMillis") or 0
        for item in (data or {}).get("results") or []
        if item.get("wrapperType") == "track"
    )
    if total_ms <= 0:
        return None
    return round(total_ms / 60000, 2)


def to_candidate(album: dict, title: str, year: int | None = None,
                 artist: str | None = None, minutes: float | None = None) -> Candidate:
    """Normalize one iTunes collection result."""
    cover_url = album.get("artworkUrl100") or ""
    if cover_url:
        cover_url = cover_url.replace("100x100bb.jpg", "1000x1000bb.jpg")
    name = album.get("collectionName") or title
    released = album.get("releaseDate")
    return Candidate(
        title=name,
        owner=album.get("artistName") or artist or "Unknown",
        year=_release_year(released) or year,
        genres=album.get("primaryGenreName") or "",
        synopsis=f"Auto-imported via iTunes Search API for {name}. Replace with your synopsis.",
        cover_url=cover_url,
        source_url=album.get("collectionViewUrl") or "",
        length_minutes=minutes,
        runtime=format_album_runtime(minutes),
        runtime_detail=f"Released {released[:10]}" if released else "",
        source="itunes",
    )


def fetch_candidates(title: str, year: int | None = None, artist: str | None = None) -> list[Candidate]:
    """
    iTunes candidates. The year filter and then the artist filter are each
    applied only when they keep at least one result.
    """
    params = {
        "term": f"{title} {artist}" if artist else title,
        "entity": "album",
        "limit": 10,
        "country": "us",
    }
    try:
        data = _get(ITUNES_SEARCH, params)
    except _FAILURES as e:
        print(f"  ⚠ iTunes search failed: {e}")
        return []

    results = (data or {}).get("results") or []
    if year:
        filtered = [a for a in results if _release_year(a.get("releaseDate")) == year]
        if filtered:
            results = filtered
    if artist:
        needle = artist.lower()
        filtered = [a for a in results if needle in (a.get("artistName") or "").lower()]
        if filtered:
            results = filtered

    candidates = []
    for album in results:
        minutes = collection_minutes(album["collectionId"]) if album.get("collectionId") else None
        candidates.append(to_candidate(album, title, year, artist, minutes))
    return candidates


def main():
    parser = argparse.ArgumentParser(description="Search albums on iTunes")
    parser.add_argument("title", help="Album title")
    parser.add_argument("--artist", "-a", help="Artist name")
    parser.add_argument("--year", "-y", type=int, help="Release year")
    args = parser.parse_args()

    results = fetch_candidates(args.title, args.year, args.artist)
    if not results:
        print("No results found.")
        return
    for c in results:
        print(f"  {describe(c)} | {c.runtime or '?'} | {c.source_url}")


if __name__ == "__main__":
    main()
