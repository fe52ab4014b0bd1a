#!/usr/bin/env python3
"""
Search album releases on MusicBrainz, with cover art from the Cover Art
Archive. Free, no auth. MusicBrainz allows 1 req/sec and requires a
descriptive User-Agent.

Usage:
    python3 fetch_musicbrainz_album.py "In Rainbows" --artist "Radiohead" [--year 2007]
"""

import argparse
import os
import sys
import urllib.error

sys.path.insert(0, os.path.dirname(__file__))
from candidates import Candidate, describe, format_album_runtime, release_detail
from rate_limiter import get_json, musicbrainz_bucket, coverart_bucket

MUSICBRAINZ_API = "https://musicbrainz.org/ws/2"
COVER_ART_API = "https://coverartarchive.org/release"
RELEASE_URL = "https://musicbrainz.org/release"

_FAILURES = (urllib.error.URLError, TimeoutError, ValueError)


def _get(path: str, params: dict = None) -> dict | None:
    """MusicBrainz GET. Returns None on any request failure."""
    try:
        return get_json(f"{MUSICBRAINZ_API}{path}", params, musicbrainz_bucket)
    except _FAILURES as e:
        print(f"    ⚠ MusicBrainz request failed: {e}")
        return None


def build_query(title: str, year: int | None = None, artist: str | None = None) -> str:
    """Lucene query: release:"T" AND artist:"A" AND date:Y"""
    filters = [f'release:"{title}"']
    if artist:
        filters.append(f'artist:"{artist}"')
    if year:
        filters.append(f"date:{year}")
    return " AND ".join(filters)


def search_releases(title: str, year: int | None = None, artist: str | None = None) -> list[dict]:
    data = _get("/release/", {"query": build_query(title, year, artist), "fmt": "json", "limit": 5})
    return (data or {}).get("releases") or []


def fetch_cover_url(mbid: str) -> str:
    """Front cover (or first image) for a release, '' when there is none."""
    try:
        data = get_json(f"{COVER_ART_API}/{mbid}", bucket=coverart_bucket)
    except _FAILURES:
        return ""
    images = (data or {}).get("images") or []
    if not images:
        return ""
    primary = next((img for img in images if img.get("front")), images[0])
    return primary.get("image") or (primary.get("thumbnails") or {}).get("large") or ""


def _credit_names(release: dict) -> str:
    names = []
    for credit in release.get("artist-credit") or []:
        name = credit.get("name") or (credit.get("artist") or {}).get("name")
        if name:
            names.append(name)
    return ", ".join(names)


def _year_from_date(date: str | None, fallback: int | None) -> int | None:
    if date and date[:4].isdigit():
        return int(date[:4])
    return fallback


def to_candidate(release: dict, cover_url: str, title: str,
                 year: int | None = None, artist: str | None = None) -> Candidate:
    """Normalize one MusicBrainz release search hit."""
    return Candidate(
        title=release.get("title") or title,
        owner=_credit_names(release) or artist or "Unknown",
        year=_year_from_date(release.get("date"), year),
        genres=", ".join(t["name"] for t in release.get("tags") or [] if t.get("name")),
        synopsis="",
        cover_url=cover_url,
        source_url=f"{RELEASE_URL}/{release['id']}",
        runtime="",
        runtime_detail=release_detail(release.get("date")),
        source="musicbrainz",
        mbid=release["id"],
    )


def fetch_candidates(title: str, year: int | None = None, artist: str | None = None) -> list[Candidate]:
    """Releases that have cover art, in search order."""
    candidates = []
    for release in search_releases(title, year, artist):
        if not release.get("id"):
            continue
        cover_url = fetch_cover_url(release["id"])
        if not cover_url:
            continue
        candidates.append(to_candidate(release, cover_url, title, year, artist))
    return candidates


def populate_runtime(candidate: Candidate) -> None:
    """Sum the release's track lengths into length_minutes/runtime."""
    if not candidate.mbid:
        return
    detail = _get(f"/release/{candidate.mbid}", {"inc": "recordings", "fmt": "json"})
    if not detail:
        return
    total_ms = 0
    for medium in detail.get("media") or []:
        for track in medium.get("tracks") or []:
            length = track.get("length")
            if isinstance(length, (int, float)):
                total_ms += length
    if total_ms > 0:
        candidate.length_minutes = total_ms / 60000
        candidate.runtime = format_album_runtime(candidate.length_minutes)
    if not candidate.runtime_detail and detail.get("date"):
        candidate.runtime_detail = release_detail(detail["date"])


def main():
    parser = argparse.ArgumentParser(description="Search albums on MusicBrainz")
    parser.add_argument("title", help="Album title")
    parser.add_argument("--artist", "-a", help="Artist name")
    parser.add_argument("--year", "-y", type=int, help="Release year")
    args = parser.parse_args()

    print(f"Searching MusicBrainz for: {build_query(args.title, args.year, args.artist)}")
    results = fetch_candidates(args.title, args.year, args.artist)
    if not results:
        print("No releases with cover art found.")
        return
    for c in results:
        populate_runtime(c)
        print(f"  {describe(c)} | {c.runtime or '?'} | {c.source_url}")


if __name__ == "__main__":
    main()
