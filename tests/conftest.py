"""Pytest fixtures: a throwaway site root with templates and inline-data pages."""

import pytest

from candidates import Candidate
from review_markdown import build_frontmatter

TEMPLATE = """<!doctype html>
<title>{{ title }} ({{ year }})</title>
<img class="{{ cover_class }}" src="{{ cover }}" alt="{{ title }} cover">
<p class="eyebrow">{{ eyebrow }}</p>
<h3>{{ meta_label }}</h3>
<div class="chips">{{ meta_chips }}</div>
<p class="detail">{{ runtime_detail }}</p>
<div class="genres">{{ genre_chips }}</div>
<div class="score" style="--score: {{ score_ratio }}" aria-label="{{ score_aria }}">{{ score_text }}</div>
<section>{{ synopsis }}</section>
<article>{{ review }}</article>
<footer>{{ not_a_field }}</footer>
"""

INDEX_HTML = """<!doctype html>
<html>
<body>
  <h1>Kawaii Review</h1>
  <script id="anime-data-inline" type="application/json">
[]
  </script>
  <script id="album-data-inline" type="application/json">[]</script>
  <script src="assets/js/main.js"></script>
</body>
</html>
"""

ARCHIVE_HTML = """<html><body>
  <div class="archive-grid" data-archive="{kind}"></div>
  <script id="{script_id}" type="application/json">[]</script>
</body></html>
"""


@pytest.fixture
def site(tmp_path_factory, monkeypatch):
    """Site root wired through $KAWAII_ROOT."""
    tmp_path = tmp_path_factory.mktemp("site").resolve()
    monkeypatch.setenv("KAWAII_ROOT", str(tmp_path))
    monkeypatch.delenv("KAWAII_DRY_RUN", raising=False)
    monkeypatch.delenv("KAWAII_OVERWRITE", raising=False)

    (tmp_path / "templates").mkdir()
    (tmp_path / "templates" / "anime.html").write_text(TEMPLATE, encoding="utf-8")
    (tmp_path / "templates" / "album.html").write_text(TEMPLATE, encoding="utf-8")
    (tmp_path / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (tmp_path / "anime").mkdir()
    (tmp_path / "album").mkdir()
    (tmp_path / "anime" / "all-anime.html").write_text(
        ARCHIVE_HTML.format(kind="anime", script_id="anime-archive-data"), encoding="utf-8")
    (tmp_path / "album" / "all-album.html").write_text(
        ARCHIVE_HTML.format(kind="album", script_id="album-archive-data"), encoding="utf-8")
    return tmp_path


@pytest.fixture
def anime_candidate():
    return Candidate(
        title="Mushishi",
        owner="Artland",
        year=2005,
        genres="Adventure, Mystery, Slice of Life",
        synopsis="Mushi are the most basic forms of life.\n\nGinko travels to study them.",
        cover_url="https://img.example/mushishi.png",
        source_url="https://anilist.co/anime/457",
        seasons=1,
        episodes=26,
        runtime="1 Season × 26 Episodes",
        runtime_detail="Aired Oct 2005 – Jun 2006",
        source="anilist",
    )


@pytest.fixture
def album_candidate():
    return Candidate(
        title="In Rainbows",
        owner="Radiohead",
        year=2007,
        genres="Alternative",
        cover_url="https://coverartarchive.org/release/abc/1.jpg",
        source_url="https://musicbrainz.org/release/abc",
        length_minutes=42.5,
        runtime="43 mins",
        runtime_detail="Released 2007-10-10",
        source="musicbrainz",
        mbid="abc",
    )


@pytest.fixture
def write_review(site):
    """Write <kind>/<slug>/blog.md from a candidate and an optional review body."""
    def _write(kind, candidate, slug=None, body=None, created="2024-01-01T00:00:00.000Z"):
        from utils import slugify

        slug = slug or slugify(candidate.title)
        folder = site / kind / slug
        folder.mkdir(parents=True, exist_ok=True)
        text = build_frontmatter(kind, candidate, "cover.jpg", created)
        if body is not None:
            text = text.split("## Review")[0] + body
        (folder / "blog.md").write_text(text, encoding="utf-8")
        return folder
    return _write


@pytest.fixture
def scripted():
    """Build an ask() replacement that replays answers in order."""
    def make(*answers):
        queue = list(answers)

        def ask(prompt):
            return queue.pop(0)
        return ask
    return make
