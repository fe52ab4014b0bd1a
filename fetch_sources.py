#!/usr/bin/env python3
"""
Resolve review candidates from the metadata sources in fallback order.
The first source with at least one hit wins; sources are never merged.

    anime: AniList -> Jikan
    album: MusicBrainz -> TheAudioDB -> iTunes

Usage:
    python3 fetch_sources.py anime "Mushishi"
    python3 fetch_sources.py album "In Rainbows" --artist "Radiohead"
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(__file__))
import fetch_anilist_anime as anilist
import fetch_jikan_anime as jikan
import fetch_musicbrainz_album as musicbrainz
import fetch_audiodb_album as audiodb
import fetch_itunes_album as itunes
from candidates import Candidate, describe
from rate_limiter import print_stats
from utils import ReviewError


def _first_hit(sources, *args) -> list[Candidate]:
    for label, fetch in sources:
        candidates = fetch(*args)
        if candidates:
            print(f"  ✓ {len(candidates)} match{'es' if len(candidates) != 1 else ''} from {label}")
            return candidates
        print(f"  · nothing from {label}")
    return []

# ─── Anime ────────────────────────────────────────────────────────────────────

def fetch_anime_candidates(title: str, year: int | None = None) -> list[Candidate]:
    sources = [
        ("AniList", anilist.fetch_candidates),
        ("Jikan", jikan.fetch_candidates),
    ]
    return _first_hit(sources, title, year)

# ─── Album ────────────────────────────────────────────────────────────────────

def fetch_album_candidates(title: str, year: int | None = None, artist: str | None = None) -> list[Candidate]:
    sources = [
        ("MusicBrainz", musicbrainz.fetch_candidates),
        ("TheAudioDB", audiodb.fetch_candidates),
        ("iTunes", itunes.fetch_candidates),
    ]
    return _first_hit(sources, title, year, artist)


def fetch_candidates(kind: str, title: str, year: int | None = None, artist: str | None = None) -> list[Candidate]:
    """Candidate set for a kind. Raises ReviewError when every source comes up empty."""
    if kind == "anime":
        candidates = fetch_anime_candidates(title, year)
    else:
        candidates = fetch_album_candidates(title, year, artist)
    if not candidates:
        raise ReviewError(f'No {kind} results for "{title}".')
    return candidates

# ─── Main ─────────────────────────────────────────────────────────────────────

def main():
    parser = argparse.ArgumentParser(description="Resolve review candidates across sources")
    parser.add_argument("kind", choices=["anime", "album"])
    parser.add_argument("title", help="Title to search for")
    parser.add_argument("--year", "-y", type=int, help="Release/airing year")
    parser.add_argument("--artist", "-a", help="Album artist")
    args = parser.parse_args()

    print(f"Searching {args.kind} sources for: {args.title}")
    try:
        candidates = fetch_candidates(args.kind, args.title, args.year, args.artist)
    except ReviewError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    for i, c in enumerate(candidates, 1):
        print(f"  {i}. {describe(c)} [{c.source}]")
    print_stats()


if __name__ == "__main__":
    main()
