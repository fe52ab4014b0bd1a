"""
Denormalized review index.

data/anime.json and data/albums.json are JSON arrays of card entries. Every
write is mirrored into the inline <script> blocks of the HTML pages that
embed a copy (index.html and the per-kind archive page). The JSON file and
the HTML copies are overwritten one after another; there is no atomicity
across them.
"""
import json
import re
from datetime import datetime, timezone

from utils import ReviewError, data_file, inline_targets, load_json, relative_to_root

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created_key(entry: dict) -> datetime:
    """Sort key; entries without a parseable timestamp sort first."""
    raw = entry.get("created")
    if not isinstance(raw, str) or not raw:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def load_index(kind: str) -> list[dict]:
    """Index entries for a kind. A missing file is an empty index."""
    path = data_file(kind)
    if not path.exists():
        return []
    try:
        items = load_json(path)
    except json.JSONDecodeError as e:
        raise ReviewError(f"{relative_to_root(path)} is not valid JSON: {e}") from e
    if not isinstance(items, list):
        raise ReviewError(f"{relative_to_root(path)} must contain a JSON array.")
    return items


def dump_index(items: list[dict]) -> str:
    return json.dumps(items, indent=2, ensure_ascii=False) + "\n"


def write_index(kind: str, items: list[dict]) -> str:
    """Rewrite the JSON index and every inline copy. Returns the JSON text."""
    path = data_file(kind)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = dump_index(items)
    path.write_text(text, encoding="utf-8")
    update_inline_scripts(kind, text)
    return text


def replace_inline_script(html: str, script_id: str, json_text: str) -> str | None:
    """
    Replace the body of <script id="script_id" ...>...</script>.
    Returns None when the page has no such block.
    """
    pattern = re.compile(
        r'(<script id="' + re.escape(script_id) + r'"[^>]*>)([\s\S]*?)(</script>)'
    )
    if not pattern.search(html):
        return None
    # "</" would end the script element early
    payload = json_text.strip().replace("</", "<\\/")
    return pattern.sub(lambda m: f"{m.group(1)}\n{payload}\n  {m.group(3)}", html, count=1)


def update_inline_scripts(kind: str, json_text: str) -> list:
    """Mirror the index into each HTML target. Missing or unreadable pages are skipped."""
    updated = []
    for path, script_id in inline_targets(kind):
        if not path.exists():
            continue
        try:
            html = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"  ⚠ Skipping {relative_to_root(path)}: {e}")
            continue
        new_html = replace_inline_script(html, script_id, json_text)
        if new_html is None:
            print(f"  ⚠ {relative_to_root(path)} has no <script id=\"{script_id}\"> block")
            continue
        path.write_text(new_html, encoding="utf-8")
        updated.append(path)
    return updated


def upsert_entry(kind: str, entry: dict) -> list[dict]:
    """Replace the entry with the same slug (or append) and re-sort by created."""
    items = [item for item in load_index(kind) if item.get("slug") != entry["slug"]]
    items.append(entry)
    items.sort(key=_created_key)
    write_index(kind, items)
    return items


def set_link(kind: str, slug: str, link: str) -> bool:
    """Point an indexed entry at its rendered page. No-op when not indexed."""
    if not data_file(kind).exists():
        return False
    items = load_index(kind)
    for item in items:
        if item.get("slug") == slug:
            item["link"] = link
            write_index(kind, items)
            return True
    return False


def remove_entry(kind: str, slug: str) -> bool:
    """Drop an entry. Returns False when the slug was not indexed."""
    items = load_index(kind)
    remaining = [item for item in items if item.get("slug") != slug]
    if len(remaining) == len(items):
        return False
    write_index(kind, remaining)
    return True


def make_entry(kind: str, slug: str, title: str, year, owner: str, cover: str, created: str) -> dict:
    """Card entry in index key order."""
    return {
        "slug": slug,
        "title": title,
        "year": year,
        "artist" if kind == "album" else "studio": owner,
        "cover": cover,
        "link": None,
        "created": created,
    }
