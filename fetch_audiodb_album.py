#!/usr/bin/env python3
"""
Search albums on TheAudioDB (free test key "2").

Usage:
    python3 fetch_audiodb_album.py "Discovery" --artist "Daft Punk"
"""

import argparse
import os
import sys
import urllib.error

sys.path.insert(0, os.path.dirname(__file__))
from candidates import Candidate, describe, format_album_runtime
from rate_limiter import get_json, audiodb_bucket

AUDIODB_SEARCH = "https://theaudiodb.com/api/v1/json/2/searchalbum.php"


def _get(params: dict) -> dict:
    return get_json(AUDIODB_SEARCH, params, audiodb_bucket)


def _as_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_candidate(album: dict, title: str, year: int | None = None, artist: str | None = None) -> Candidate:
    """Normalize one TheAudioDB album object. Durations are in seconds."""
    cover_url = (
        album.get("strAlbumThumbHQ")
        or album.get("strAlbumThumb")
        or album.get("strAlbumCDart")
        or album.get("strAlbumSpine")
        or ""
    )
    seconds = _as_int(album.get("intDuration"))
    minutes = seconds / 60 if seconds else None
    released = _as_int(album.get("intYearReleased"))
    mbid = album.get("strMusicBrainzID")
    album_title = album.get("strAlbum") or title
    return Candidate(
        title=album_title,
        owner=album.get("strArtist") or artist or "Unknown",
        year=released or year,
        genres=album.get("strGenre") or "",
        synopsis=album.get("strDescriptionEN")
        or f"Auto-imported via TheAudioDB for {album_title}. Replace with your synopsis.",
        cover_url=cover_url,
        source_url=f"https://musicbrainz.org/release/{mbid}" if mbid else "",
        length_minutes=minutes,
        runtime=format_album_runtime(minutes),
        runtime_detail=f"Released {released}" if released else "",
        source="theaudiodb",
    )


def fetch_candidates(title: str, year: int | None = None, artist: str | None = None) -> list[Candidate]:
    """TheAudioDB candidates; request failures yield none."""
    params = {}
    if artist:
        params["s"] = artist
    params["a"] = title
    try:
        data = _get(params)
    except (urllib.error.URLError, TimeoutError, ValueError) as e:
        print(f"  ⚠ TheAudioDB search failed: {e}")
        return []

    results = (data or {}).get("album") or []
    if year:
        filtered = [a for a in results if _as_int(a.get("intYearReleased")) == year]
        if filtered:
            results = filtered
    return [to_candidate(a, title, year, artist) for a in results]


def main():
    parser = argparse.ArgumentParser(description="Search albums on TheAudioDB")
    parser.add_argument("title", help="Album title")
    parser.add_argument("--artist", "-a", help="Artist name")
    parser.add_argument("--year", "-y", type=int, help="Release year")
    args = parser.parse_args()

    results = fetch_candidates(args.title, args.year, args.artist)
    if not results:
        print("No results found.")
        return
    for c in results:
        print(f"  {describe(c)} | {c.runtime or '?'} | {c.cover_url}")


if __name__ == "__main__":
    main()
