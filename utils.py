"""
Shared utilities for the review scripts.
"""
import re
import os
import json
import unicodedata
from datetime import datetime, timezone
from pathlib import Path


KINDS = ("anime", "album")


class ReviewError(Exception):
    """Operator-facing failure. CLIs print the message and exit 1."""


def slugify(text: str) -> str:
    """
    Generate a URL-safe slug from text.
    'My Dress-Up Darling' -> 'my-dress-up-darling'
    'Pokémon: The First Movie' -> 'pokemon-the-first-movie'
    """
    text = unicodedata.normalize("NFKD", text or "")
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "entry"


def strip_html(text: str) -> str:
    """Flatten an HTML description to plain text."""
    if not text:
        return ""
    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"</?[^>]+(>|$)", "", text)
    text = re.sub(r"&nbsp;", " ", text, flags=re.IGNORECASE)
    text = re.sub(r"&amp;", "&", text, flags=re.IGNORECASE)
    text = re.sub(r"&quot;", '"', text, flags=re.IGNORECASE)
    text = text.replace("&#39;", "'")
    return text.strip()


_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_float(value) -> float | None:
    """
    Parse the leading number of a value.
    '8.5/10' -> 8.5, 'great' -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return None
    return float(match.group(1))


def utc_timestamp() -> str:
    """Current UTC time as '2024-05-01T12:34:56.789Z'."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def load_json(filepath: str | Path) -> dict | list:
    """Load JSON from file."""
    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)


# Site root: $KAWAII_ROOT, else the working directory
def site_root() -> Path:
    return Path(os.environ.get("KAWAII_ROOT") or os.getcwd()).resolve()

def kind_dir(kind: str) -> Path:
    return site_root() / kind

def review_dir(kind: str, slug: str) -> Path:
    return kind_dir(kind) / slug

def data_file(kind: str) -> Path:
    return site_root() / "data" / ("anime.json" if kind == "anime" else "albums.json")

def template_file(kind: str) -> Path:
    return site_root() / "templates" / f"{kind}.html"

def inline_targets(kind: str) -> list[tuple[Path, str]]:
    """HTML files mirroring the index, with the id of their <script> block."""
    root = site_root()
    if kind == "anime":
        return [
            (root / "index.html", "anime-data-inline"),
            (root / "anime" / "all-anime.html", "anime-archive-data"),
        ]
    return [
        (root / "index.html", "album-data-inline"),
        (root / "album" / "all-album.html", "album-archive-data"),
    ]

def relative_to_root(path: Path) -> str:
    """Site-relative POSIX path for console output and index entries."""
    return Path(path).resolve().relative_to(site_root()).as_posix()

def list_slugs(kind: str) -> list[str]:
    """Review folders for a kind, sorted."""
    base = kind_dir(kind)
    if not base.is_dir():
        return []
    return sorted(p.name for p in base.iterdir() if p.is_dir())
