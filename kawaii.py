#!/usr/bin/env python3
"""
KawaiiReview CLI

Usage:
    python3 kawaii.py new <anime|album> "Title" [--year YYYY] [--artist NAME] [--dry-run] [--overwrite]
    python3 kawaii.py build <anime|album> <slug>
    python3 kawaii.py build-all [anime|album|all]
    python3 kawaii.py list [anime|album|all]
    python3 kawaii.py delete <anime|album> <slug>

Global options:
    --root PATH   site root (default: $KAWAII_ROOT or the current directory)
"""

import argparse
import os
import shutil
import sys

sys.path.insert(0, os.path.dirname(__file__))
import new_review as scaffold
from build_entry import build_entry
from data_index import remove_entry
from fuzzy_match import did_you_mean
from rate_limiter import print_stats
from review_markdown import read_frontmatter
from utils import KINDS, ReviewError, kind_dir, list_slugs, review_dir, slugify

SCOPES = ["anime", "album", "all"]
SECTION_LABELS = {"anime": "Anime", "album": "Albums"}


def _kinds_for(scope: str) -> list[str]:
    return list(KINDS) if scope == "all" else [scope]


def _score_label(score) -> str:
    try:
        value = float(score)
    except (TypeError, ValueError):
        return ""
    return f" • Score {value:.1f}"


# ─── Commands ─────────────────────────────────────────────────────────────────

def build_all(scope: str) -> int:
    targets = [(kind, slug) for kind in _kinds_for(scope) for slug in list_slugs(kind)]
    if not targets:
        raise ReviewError("No matching entries to build.")
    for kind, slug in targets:
        print(f"→ Building {kind} {slug}")
        build_entry(kind, slug)
    return len(targets)


def describe_entries(kind: str) -> list[dict]:
    entries = []
    for slug in list_slugs(kind):
        meta = read_frontmatter(review_dir(kind, slug) / "blog.md")
        entries.append({
            "slug": slug,
            "title": str(meta.get("title") or slug),
            "score": meta.get("score"),
        })
    return entries


def list_reviews(scope: str) -> None:
    for kind in _kinds_for(scope):
        print(f"{SECTION_LABELS[kind]}:")
        entries = describe_entries(kind)
        if not entries:
            print("  (none)")
            continue
        for e in sorted(entries, key=lambda e: e["title"].casefold()):
            print(f"  - {e['title']} ({e['slug']}){_score_label(e['score'])}")


def delete_review(kind: str, slug: str, ask=scaffold.ask) -> bool:
    """Remove a review folder and its index card after confirmation."""
    folder = review_dir(kind, slug)
    # only a plain slug folder directly under <kind>/ may be removed
    if slug != slugify(slug) or folder.parent != kind_dir(kind) or not folder.is_dir():
        hint = did_you_mean(slug, list_slugs(kind))
        raise ReviewError(f'No {kind} review found for slug "{slug}".' + (f"\n{hint}" if hint else ""))

    meta = read_frontmatter(folder / "blog.md")
    title = meta.get("title") or slug
    answer = ask(f"Delete {title} ({kind})? Are you sure? (y|N) ").lower()
    if answer not in ("y", "yes"):
        print("Aborted.")
        return False

    shutil.rmtree(folder)
    if not remove_entry(kind, slug):
        print("  ⚠ Deleted files, but entry was not present in data JSON.")
    print(f'Removed {kind} review "{title}" ({slug}).')
    return True


# ─── Main ─────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kawaii", description="KawaiiReview CLI")
    parser.add_argument("--root", help="Site root (default: $KAWAII_ROOT or cwd)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    new_p = subparsers.add_parser("new", help="Scaffold a review from metadata APIs")
    new_p.add_argument("kind", choices=KINDS)
    new_p.add_argument("title", nargs="+", help="Title (wrap it in quotes)")
    new_p.add_argument("--year", "-y", type=int, help="Release/airing year filter")
    new_p.add_argument("--artist", "-a", help="Album artist (better search results)")
    new_p.add_argument("--dry-run", action="store_true",
                       default=os.environ.get("KAWAII_DRY_RUN") == "1",
                       help="Fetch and preview metadata without writing files")
    new_p.add_argument("--overwrite", action="store_true",
                       default=os.environ.get("KAWAII_OVERWRITE") == "1",
                       help="Replace an existing slug if it already exists")

    build_p = subparsers.add_parser("build", help="Render one review page")
    build_p.add_argument("kind", choices=KINDS)
    build_p.add_argument("slug")

    build_all_p = subparsers.add_parser("build-all", help="Render every review page")
    build_all_p.add_argument("scope", nargs="?", default="all", choices=SCOPES)

    list_p = subparsers.add_parser("list", help="List reviews")
    list_p.add_argument("scope", nargs="?", default="all", choices=SCOPES)

    delete_p = subparsers.add_parser("delete", help="Delete a review")
    delete_p.add_argument("kind", choices=KINDS)
    delete_p.add_argument("slug")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.root:
        os.environ["KAWAII_ROOT"] = os.path.abspath(args.root)

    try:
        if args.command == "new":
            try:
                scaffold.new_review(
                    args.kind, " ".join(args.title), args.year, args.artist,
                    dry_run=args.dry_run, overwrite=args.overwrite,
                )
            finally:
                print_stats()
        elif args.command == "build":
            build_entry(args.kind, args.slug)
        elif args.command == "build-all":
            build_all(args.scope)
        elif args.command == "list":
            list_reviews(args.scope)
        elif args.command == "delete":
            delete_review(args.kind, args.slug)
    except (scaffold.Cancelled, KeyboardInterrupt):
        print("Cancelled.")
        return 0
    except ReviewError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
