#!/usr/bin/env python3
"""
Render one review's blog.md into <kind>/<slug>/<slug>.html using the
site template, then point the index card at the page.

Usage:
    python3 build_entry.py anime mushishi
    python3 build_entry.py album in-rainbows
"""
import argparse
import html
import os
import re
import sys

import markdown

sys.path.insert(0, os.path.dirname(__file__))
from candidates import format_album_runtime, format_anime_runtime
from data_index import set_link
from fuzzy_match import did_you_mean
from review_markdown import parse_frontmatter
from utils import ReviewError, list_slugs, parse_float, relative_to_root, review_dir, slugify, template_file

CHIP_JOIN = "\n          "
PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def _text(value) -> str:
    return html.escape("" if value is None else str(value))


def paragraphize(text: str) -> str:
    """Blank-line separated paragraphs, single newlines as <br>."""
    if not text or not str(text).strip():
        return "<p></p>"
    paragraphs = re.split(r"\n{2,}", str(text).strip())
    return "\n".join(f"<p>{_text(p.strip()).replace(chr(10), '<br>')}</p>" for p in paragraphs)


def render_review(body: str) -> str:
    if not body or not body.strip():
        return "<p></p>"
    return markdown.markdown(body, extensions=["nl2br"])


def _count(value) -> int | None:
    number = parse_float(value)
    if number is None:
        return None
    return int(number) if number.is_integer() else number


def format_runtime(kind: str, data: dict) -> str:
    """Explicit runtime label, else derived from minutes or seasons/episodes."""
    if data.get("runtime"):
        return str(data["runtime"])
    if kind == "album":
        minutes = data.get("length_minutes")
        if minutes in (None, ""):
            minutes = data.get("minutes")
        return format_album_runtime(parse_float(minutes))
    seasons = next((data[k] for k in ("seasons", "season_count", "season") if data.get(k) not in (None, "")), None)
    episodes = next((data[k] for k in ("episodes", "episode_count", "total_episodes") if data.get(k) not in (None, "")), None)
    return format_anime_runtime(_count(seasons), _count(episodes))


def split_list(value) -> list[str]:
    """'Madhouse, MAPPA' / 'Rock • Pop' / 'A | B' -> tokens"""
    if not value:
        return []
    return [t.strip() for t in re.split(r"[,•|]", str(value)) if t.strip()]


def chip_markup(tokens: list[str], class_name: str, fallback: str) -> str:
    items = tokens or [fallback]
    return CHIP_JOIN.join(f'<span class="{class_name}">{_text(t)}</span>' for t in items)


def score_fields(score) -> dict:
    """score_text / score_ratio / score_aria for the score ring."""
    number = parse_float(score)
    if number is None:
        text = _text(score) if score not in (None, "") else "TBD"
        return {"score_text": text, "score_ratio": "0", "score_aria": "Unscored review"}
    text = f"{number:.1f}"
    ratio = min(max(number / 10, 0.0), 1.0)
    return {
        "score_text": text,
        "score_ratio": f"{ratio:.2f}",
        "score_aria": f"Score {text} out of 10",
    }


def apply_template(template: str, replacements: dict) -> str:
    """Substitute {{ key }} in one pass; unknown placeholders are kept."""
    def sub(match):
        key = match.group(1)
        if key not in replacements:
            return match.group(0)
        return replacements[key]
    return PLACEHOLDER.sub(sub, template)


def build_replacements(kind: str, data: dict, body: str, slug_arg: str) -> dict:
    owner = data.get("artist") if kind == "album" else data.get("studio")
    runtime = format_runtime(kind, data)
    meta_chips = chip_markup(split_list(owner), "meta-chip", "Unknown")
    if runtime:
        meta_chips += f'{CHIP_JOIN}<span class="meta-chip meta-chip-runtime">{_text(runtime)}</span>'
    year = data.get("year")

    replacements = {
        "title": _text(data.get("title") or slug_arg),
        "cover_class": f"post-cover post-cover-{kind}",
        "cover": _text(data.get("cover") or "cover.jpg"),
        "eyebrow": _text(data.get("eyebrow") or ("Anime review" if kind == "anime" else "Album review")),
        "meta_label": "Studios" if kind == "anime" else "Artists",
        "meta_chips": meta_chips,
        "runtime_detail": _text(data.get("runtime_detail") or ""),
        "genre_chips": chip_markup(split_list(data.get("genres")), "genre-chip", "Uncategorized"),
        "synopsis": paragraphize(data.get("synopsis") or ""),
        "review": render_review(body),
        "year": "" if year is None else _text(year),
    }
    replacements.update(score_fields(data.get("score")))
    return replacements


def build_entry(kind: str, slug_arg: str):
    """Render a review page. Returns the written path."""
    slug = slugify(slug_arg)
    folder = review_dir(kind, slug)
    markdown_path = folder / "blog.md"
    if not markdown_path.exists():
        hint = did_you_mean(slug, list_slugs(kind))
        raise ReviewError(f"Could not find blog.md at {kind}/{slug}/blog.md" + (f"\n{hint}" if hint else ""))

    data, body = parse_frontmatter(markdown_path.read_text(encoding="utf-8"))

    template_path = template_file(kind)
    if not template_path.exists():
        raise ReviewError(f"Missing template: templates/{kind}.html")
    template = template_path.read_text(encoding="utf-8")

    page = apply_template(template, build_replacements(kind, data, body, slug_arg))

    output_name = f"{slug}.html"
    output_path = folder / output_name
    output_path.write_text(page, encoding="utf-8")

    set_link(kind, slug, f"{kind}/{slug}/{output_name}")
    print(f"Built {kind} page → {relative_to_root(output_path)}")
    return output_path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Render a review page from blog.md")
    parser.add_argument("kind", choices=["anime", "album"])
    parser.add_argument("slug", help="Review slug (folder name)")
    args = parser.parse_args(argv)

    try:
        build_entry(args.kind, args.slug)
    except ReviewError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
