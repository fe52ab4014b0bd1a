#!/usr/bin/env python3
"""
Download review cover art.

Usage:
    python3 image_downloader.py <url> <dest-dir>
"""
import os
import posixpath
import sys
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path

sys.path.insert(0, os.path.dirname(__file__))
from rate_limiter import USER_AGENT
from utils import ReviewError

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif")
DEFAULT_EXTENSION = ".jpg"


def get_extension(url: str) -> str:
    """
    Cover file extension from the URL path, lowercased.
    Unknown or missing extensions fall back to .jpg.
    """
    if not url:
        return DEFAULT_EXTENSION
    try:
        path = urllib.parse.urlparse(url).path
    except ValueError:
        return DEFAULT_EXTENSION
    ext = posixpath.splitext(path)[1].lower()
    if ext in IMAGE_EXTENSIONS:
        return ext
    return DEFAULT_EXTENSION


def _fetch(url: str, timeout: int) -> bytes:
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    with urllib.request.urlopen(req, timeout=timeout) as response:
        return response.read()


def download_image(url: str, save_path: str | Path, timeout: int = 30) -> Path:
    """
    Download an image to save_path. Raises ReviewError on failure; nothing
    already on disk is rolled back.
    """
    if not url or not url.startswith("http"):
        raise ReviewError(f"Not a downloadable image URL: {url!r}")
    try:
        data = _fetch(url, timeout)
    except urllib.error.HTTPError as e:
        raise ReviewError(f"Failed to download image: {e.code}") from e
    except (urllib.error.URLError, TimeoutError) as e:
        raise ReviewError(f"Failed to download image: {e}") from e

    if not data:
        raise ReviewError(f"Failed to download image: empty response from {url}")

    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    save_path.write_bytes(data)
    return save_path


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python3 image_downloader.py <url> <dest-dir>", file=sys.stderr)
        sys.exit(1)
    image_url, dest_dir = sys.argv[1], sys.argv[2]
    dest = Path(dest_dir) / f"cover{get_extension(image_url)}"
    try:
        download_image(image_url, dest)
    except ReviewError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    print(f"  ✓ Saved {dest}")
