#!/usr/bin/env python3
"""
Centralized rate limiter for API calls.

Token bucket per API host. Requests make a single attempt by default;
callers may opt into retry on 429/500 with max_retries.

Usage:
    from rate_limiter import get_json, post_json, jikan_bucket

    data = get_json("https://api.jikan.moe/v4/anime", {"q": "Mushishi"}, jikan_bucket)
"""

import json
import time
import threading
import urllib.request
import urllib.error
import urllib.parse

USER_AGENT = "KawaiiReviewCLI/1.0 (kawaiireview.local)"
TIMEOUT = 30

# ── Token Bucket ──────────────────────────────────────────────────────────

class TokenBucket:
    """Rate limiter using token bucket algorithm."""

    def __init__(self, name: str, rate_per_sec: float, burst: int = 1, min_gap_sec: float = 0.0):
        """
        rate_per_sec: sustained request rate
        burst: max tokens (allows small bursts)
        min_gap_sec: minimum time between any two requests
        """
        self.name = name
        self.rate = rate_per_sec
        self.burst = burst
        self.min_gap = min_gap_sec
        self.tokens = float(burst)
        self.last_refill = time.monotonic()
        self.last_request = 0.0
        self.lock = threading.Lock()
        self.total_wait = 0.0
        self.total_requests = 0

    def acquire(self):
        """Block until a token is available."""
        with self.lock:
            now = time.monotonic()

            # Refill tokens based on elapsed time
            elapsed = now - self.last_refill
            self.tokens = min(self.burst, self.tokens + elapsed * self.rate)
            self.last_refill = now

            if self.tokens < 1.0:
                wait = (1.0 - self.tokens) / self.rate
                self.total_wait += wait
                time.sleep(wait)
                self.tokens = 0.0
                self.last_refill = time.monotonic()
            else:
                self.tokens -= 1.0

            gap_remaining = self.min_gap - (time.monotonic() - self.last_request)
            if gap_remaining > 0:
                self.total_wait += gap_remaining
                time.sleep(gap_remaining)

            self.last_request = time.monotonic()
            self.total_requests += 1

    def stats(self) -> dict:
        return {
            "total_requests": self.total_requests,
            "total_wait_seconds": round(self.total_wait, 1),
        }


# ── Per-API Buckets ───────────────────────────────────────────────────────

# AniList: 90 req/min officially, we stay at 60.
anilist_bucket = TokenBucket("AniList", rate_per_sec=60/60, burst=1, min_gap_sec=1.0)

# Jikan: 3 req/sec, 60 req/min. Community-run, so 40/min with a 1.5s gap.
jikan_bucket = TokenBucket("Jikan", rate_per_sec=40/60, burst=1, min_gap_sec=1.5)

# MusicBrainz enforces 1 req/sec per client and wants a real User-Agent.
musicbrainz_bucket = TokenBucket("MusicBrainz", rate_per_sec=1.0, burst=1, min_gap_sec=1.0)

# Cover Art Archive has no published limit; one search fans out to 5 lookups.
coverart_bucket = TokenBucket("CoverArt", rate_per_sec=2.0, burst=2)

# TheAudioDB free key: 30 req/min.
audiodb_bucket = TokenBucket("TheAudioDB", rate_per_sec=30/60, burst=2)

# iTunes Search: ~20 req/min.
itunes_bucket = TokenBucket("iTunes", rate_per_sec=20/60, burst=3)

ALL_BUCKETS = [
    anilist_bucket,
    jikan_bucket,
    musicbrainz_bucket,
    coverart_bucket,
    audiodb_bucket,
    itunes_bucket,
]


# ── Request Helpers ───────────────────────────────────────────────────────

def _retry_request(make_request, max_retries: int = 4, label: str = ""):
    """Execute a request function with retry on 429 and 500."""
    for attempt in range(max_retries):
        try:
            return make_request()
        except urllib.error.HTTPError as e:
            if e.code == 429 and attempt < max_retries - 1:
                retry_after = e.headers.get("Retry-After") if e.headers else None
                if retry_after and retry_after.isdigit():
                    wait = int(retry_after) + 1
                else:
                    wait = (attempt + 1) * 20  # 20s, 40s, 60s
                print(f"    ⏳ 429 rate limited{f' ({label})' if label else ''}, "
                      f"waiting {wait}s (attempt {attempt+1}/{max_retries})")
                time.sleep(wait)
            elif e.code == 500 and attempt < max_retries - 1:
                wait = (attempt + 1) * 5
                print(f"    ⚠ 500 server error{f' ({label})' if label else ''}, "
                      f"retrying in {wait}s (attempt {attempt+1}/{max_retries})")
                time.sleep(wait)
            else:
                raise


def build_url(url: str, params: dict | None = None) -> str:
    """Append non-empty query params to a URL."""
    if not params:
        return url
    clean = {k: v for k, v in params.items() if v is not None and v != ""}
    if not clean:
        return url
    return url + "?" + urllib.parse.urlencode(clean)


def get_json(url: str, params: dict = None, bucket: TokenBucket = None, label: str = "",
             max_retries: int = 1):
    """
    Rate-limited GET. Returns parsed JSON.
    One attempt unless max_retries > 1 (retries 429/500 only).
    """
    full_url = build_url(url, params)

    def make_request():
        if bucket:
            bucket.acquire()
        req = urllib.request.Request(full_url, headers={
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })
        with urllib.request.urlopen(req, timeout=TIMEOUT) as resp:
            return json.loads(resp.read())

    return _retry_request(make_request, max_retries, label=label or (bucket.name if bucket else ""))


def post_json(url: str, payload: dict, bucket: TokenBucket = None, label: str = "",
              max_retries: int = 1):
    """Rate-limited JSON POST. Returns parsed JSON; retries as get_json."""
    def make_request():
        if bucket:
            bucket.acquire()
        req = urllib.request.Request(
            url,
            data=json.dumps(payload).encode(),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
        )
        with urllib.request.urlopen(req, timeout=TIMEOUT) as resp:
            return json.loads(resp.read())

    return _retry_request(make_request, max_retries, label=label or (bucket.name if bucket else ""))


def print_stats():
    """Print rate limiter statistics for buckets that were used."""
    used = [b for b in ALL_BUCKETS if b.total_requests]
    if not used:
        return
    print("\n📊 Rate limiter stats:")
    for b in used:
        s = b.stats()
        print(f"   {b.name + ':':<13} {s['total_requests']} requests, {s['total_wait_seconds']}s total wait")
