"""
Read and write review markdown files (blog.md).

Values are written JSON-quoted, one per line, which is valid YAML and keeps
the Astro content schema happy. Reading goes through python-frontmatter.
"""
import json
from pathlib import Path

import frontmatter
import yaml

from candidates import Candidate
from utils import ReviewError

REVIEW_PLACEHOLDER = "## Review\n\nWrite your review here...\n"


def _q(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def owner_key(kind: str) -> str:
    return "artist" if kind == "album" else "studio"


def build_frontmatter(kind: str, candidate: Candidate, cover_name: str, created: str) -> str:
    """Full blog.md text for a freshly scaffolded review."""
    c = candidate
    lines = [
        "---",
        f"title: {_q(c.title)}",
        f"{owner_key(kind)}: {_q(c.owner or '')}",
        f"year: {c.year}" if c.year is not None else "year:",
        f"genres: {_q(c.genres or '')}",
        f"cover: {_q(cover_name)}",
        f"source_url: {_q(c.source_url or '')}",
        f"created: {_q(created)}",
        f"type: {_q(kind)}",
        f"synopsis: {_q(c.synopsis or '')}",
    ]
    if kind == "album":
        lines.append(f"length_minutes: {_q(c.length_minutes if c.length_minutes is not None else '')}")
    else:
        lines.append(f"seasons: {_q(c.seasons if c.seasons is not None else '')}")
        lines.append(f"episodes: {_q(c.episodes if c.episodes is not None else '')}")
    lines += [
        f"runtime: {_q(c.runtime or '')}",
        f"score: {_q(c.score)}",
        f"runtime_detail: {_q(c.runtime_detail or '')}",
        "---",
        "",
        REVIEW_PLACEHOLDER,
    ]
    return "\n".join(lines)


def parse_frontmatter(text: str) -> tuple[dict, str]:
    """Split blog.md into (metadata, body). Raises ReviewError without frontmatter."""
    if not frontmatter.checks(text):
        raise ReviewError("Missing frontmatter in blog.md.")
    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as e:
        raise ReviewError(f"Invalid frontmatter in blog.md: {e}") from e
    return dict(post.metadata), post.content.strip()


def read_frontmatter(path: str | Path) -> dict:
    """Metadata of a blog.md, {} when it is missing or unreadable."""
    try:
        text = Path(path).read_text(encoding="utf-8")
        metadata, _ = parse_frontmatter(text)
    except (OSError, ReviewError):
        return {}
    return metadata
