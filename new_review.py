#!/usr/bin/env python3
"""
Scaffold a new anime or album review.

Searches the metadata sources, lets you pick a match, downloads the cover,
writes <kind>/<slug>/blog.md and adds the card to the data index (plus the
inline copies in index.html and the archive page).

Usage:
    python3 new_review.py anime "Mushishi" [--year 2005]
    python3 new_review.py album "In Rainbows" --artist "Radiohead" --year 2007
    python3 new_review.py anime "Frieren" --dry-run

Environment:
    KAWAII_DRY_RUN=1    same as --dry-run
    KAWAII_OVERWRITE=1  same as --overwrite
    KAWAII_ROOT         site root (default: current directory)
"""
import argparse
import json
import os
import shutil
import sys

sys.path.insert(0, os.path.dirname(__file__))
import fetch_musicbrainz_album as musicbrainz
from candidates import Candidate, describe, format_album_runtime, format_anime_runtime
from data_index import make_entry, upsert_entry
from fetch_sources import fetch_candidates
from image_downloader import download_image, get_extension
from rate_limiter import print_stats
from review_markdown import build_frontmatter
from utils import ReviewError, relative_to_root, review_dir, slugify, utc_timestamp, parse_float

MAX_CHOICES = 5


class Cancelled(Exception):
    """The operator backed out at a prompt."""


def ask(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


# ── Prompts ───────────────────────────────────────────────────────────────

def choose_candidate(kind: str, candidates: list[Candidate], ask=ask) -> Candidate:
    """Confirm a single match, or pick one of the first five."""
    if not candidates:
        raise ReviewError(f"No {kind} matches found.")

    if len(candidates) == 1:
        summary = describe(candidates[0])
        answer = ask(f"Is this what you're looking for? (Y/n): {summary}\n> ").lower()
        if answer not in ("", "y", "yes"):
            raise Cancelled()
        return candidates[0]

    limit = min(len(candidates), MAX_CHOICES)
    print(f"Multiple {kind} matches found:")
    for i, c in enumerate(candidates[:limit], 1):
        print(f"{i}. {describe(c)}")
    while True:
        answer = ask(f"Select 1-{limit} (or press Enter to cancel): ")
        if not answer:
            raise Cancelled()
        if answer.isdecimal() and 1 <= int(answer) <= limit:
            return candidates[int(answer) - 1]
        print("Invalid selection.")


def ask_year(ask=ask) -> int | None:
    answer = ask("Release year (leave blank to skip): ")
    if not answer:
        return None
    if answer.isdigit():
        return int(answer)
    print(f"  ⚠ Ignoring year {answer!r}")
    return None


def collect_runtime(kind: str, candidate: Candidate) -> None:
    """Fill runtime labels the search hit did not carry."""
    if kind == "album":
        if candidate.source == "musicbrainz" and (not candidate.runtime or not candidate.length_minutes):
            musicbrainz.populate_runtime(candidate)
        if not candidate.runtime and candidate.length_minutes:
            candidate.runtime = format_album_runtime(candidate.length_minutes)
    else:
        if not isinstance(candidate.seasons, int):
            candidate.seasons = 1
        if not candidate.runtime:
            candidate.runtime = format_anime_runtime(candidate.seasons, candidate.episodes)


def collect_score(candidate: Candidate, ask=ask) -> None:
    """Numeric scores are clamped to 0-10; anything else is kept as typed."""
    answer = ask("Score (0-10, leave blank to skip): ")
    if not answer:
        return
    value = parse_float(answer)
    if value is not None:
        candidate.score = min(max(value, 0.0), 10.0)
    else:
        candidate.score = answer


# ── Scaffold ──────────────────────────────────────────────────────────────

def create_review(kind: str, candidate: Candidate, dry_run: bool = False, overwrite: bool = False):
    """
    Write the review folder and index entry. Steps run in order (cover,
    blog.md, index) and a failure leaves earlier steps on disk.

    Returns the review folder, or None for a dry run.
    """
    slug = slugify(candidate.title)
    folder = review_dir(kind, slug)

    if dry_run:
        print(f"[dry-run] Would create {kind}/{slug}")
        preview = {
            "title": candidate.title,
            "owner": candidate.owner,
            "runtime": candidate.runtime,
            "runtime_detail": candidate.runtime_detail,
            "score": candidate.score,
            "cover": candidate.cover_url,
        }
        print(json.dumps(preview, indent=2, ensure_ascii=False))
        return None

    if folder.exists():
        if not overwrite:
            raise ReviewError(f"Folder already exists: {kind}/{slug} (use --overwrite)")
        shutil.rmtree(folder)
    folder.mkdir(parents=True)

    cover_name = f"cover{get_extension(candidate.cover_url)}"
    cover_path = folder / cover_name
    if candidate.cover_url:
        print(f"Downloading cover → {relative_to_root(cover_path)}")
        download_image(candidate.cover_url, cover_path)
    else:
        cover_path.write_bytes(b"")

    created = utc_timestamp()
    markdown = build_frontmatter(kind, candidate, cover_name, created)
    (folder / "blog.md").write_text(markdown, encoding="utf-8")

    entry = make_entry(
        kind, slug, candidate.title, candidate.year, candidate.owner,
        relative_to_root(cover_path), created,
    )
    upsert_entry(kind, entry)

    print(f"Created {kind} review scaffold at {kind}/{slug}")
    print("- Markdown: blog.md")
    print(f"- Cover: {cover_name}")
    return folder


def new_review(kind: str, title: str, year: int | None = None, artist: str | None = None,
               dry_run: bool = False, overwrite: bool = False, ask=ask):
    """Full interactive flow: search, choose, enrich, score, scaffold."""
    if year is None:
        year = ask_year(ask)
    if kind == "album" and not artist:
        artist = ask("Artist name (optional): ") or None

    candidates = fetch_candidates(kind, title, year, artist)
    candidate = choose_candidate(kind, candidates, ask)
    collect_runtime(kind, candidate)
    collect_score(candidate, ask)
    return create_review(kind, candidate, dry_run=dry_run, overwrite=overwrite)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Scaffold a new review from metadata APIs")
    parser.add_argument("kind", choices=["anime", "album"])
    parser.add_argument("title", nargs="+", help="Title (wrap it in quotes)")
    parser.add_argument("--year", "-y", type=int, help="Release/airing year filter")
    parser.add_argument("--artist", "-a", help="Album artist (better search results)")
    parser.add_argument("--dry-run", action="store_true",
                        default=os.environ.get("KAWAII_DRY_RUN") == "1",
                        help="Fetch and preview metadata without writing files")
    parser.add_argument("--overwrite", action="store_true",
                        default=os.environ.get("KAWAII_OVERWRITE") == "1",
                        help="Replace an existing review with the same slug")
    args = parser.parse_args(argv)

    try:
        new_review(
            args.kind, " ".join(args.title), args.year, args.artist,
            dry_run=args.dry_run, overwrite=args.overwrite,
        )
    except (Cancelled, KeyboardInterrupt):
        print("Cancelled.")
        return 0
    except ReviewError as e:
        print(e, file=sys.stderr)
        return 1
    finally:
        print_stats()
    return 0


if __name__ == "__main__":
    sys.exit(main())
