"""
Common candidate record shared by every metadata source, plus the runtime
and airing labels written into frontmatter.
"""
from dataclasses import dataclass, asdict
from typing import Optional

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


@dataclass
class Candidate:
    """One search hit, normalized from a source-specific JSON shape."""
    title: str
    owner: str = "Unknown"          # studio (anime) or artist (album)
    year: Optional[int] = None
    genres: str = ""
    synopsis: str = ""
    cover_url: str = ""
    source_url: str = ""
    runtime: str = ""
    runtime_detail: str = ""
    source: str = ""
    seasons: Optional[int] = None
    episodes: Optional[int] = None
    length_minutes: Optional[float] = None
    mbid: Optional[str] = None      # MusicBrainz release id, for runtime lookup
    score: Optional[float | str] = None

    def to_dict(self) -> dict:
        return asdict(self)


def _positive(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def format_album_runtime(minutes) -> str:
    """
    48.2 -> '48 mins', 65 -> '1 hr 05 mins', 120 -> '2 hrs'
    """
    if not _positive(minutes):
        return ""
    total = int(minutes + 0.5)
    if total < 60:
        return f"{total} mins"
    hrs, mins = divmod(total, 60)
    hour_label = f"{hrs} hr{'' if hrs == 1 else 's'}"
    if mins == 0:
        return hour_label
    return f"{hour_label} {mins:02d} mins"


def format_anime_runtime(seasons, episodes) -> str:
    """(1, 12) -> '1 Season × 12 Episodes'"""
    season_label = f"{seasons} Season{'' if seasons == 1 else 's'}" if _positive(seasons) else ""
    episode_label = f"{episodes} Episode{'' if episodes == 1 else 's'}" if _positive(episodes) else ""
    if season_label and episode_label:
        return f"{season_label} × {episode_label}"
    return season_label or episode_label


def format_date_label(date: dict | None) -> str:
    """AniList {year, month, day} -> 'Apr 2019' (or '2019' without a month)."""
    if not date or not date.get("year"):
        return ""
    month = date.get("month")
    prefix = f"{MONTHS[month - 1]} " if month and 1 <= month <= 12 else ""
    return f"{prefix}{date['year']}"


def build_airing_window(start: dict | None, end: dict | None) -> str:
    start_label = format_date_label(start)
    if not start_label:
        return ""
    end_label = format_date_label(end) if end and end.get("year") else "Present"
    return f"Aired {start_label} – {end_label}"


def release_detail(release_date: str | None) -> str:
    if not release_date:
        return ""
    return f"Released {release_date}"


def describe(candidate: Candidate) -> str:
    """One-line summary shown in the chooser."""
    info = str(candidate.year) if candidate.year else "n/a"
    return f"{candidate.title} ({info}) by {candidate.owner}"
