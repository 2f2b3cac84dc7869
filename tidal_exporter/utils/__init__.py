"""
Utility functions for tidal-exporter.

This module provides small helpers used across the application:
    - Playlist URL parsing
    - Filename sanitization
    - Display truncation
    - Path helpers

Usage:
    from tidal_exporter.utils import (
        extract_playlist_id,
        sanitize_filename,
        ensure_directory
    )
"""

import re
from pathlib import Path


# TIDAL playlist IDs are UUIDs: 36 characters of hex digits and dashes
_PLAYLIST_ID_PATTERN = re.compile(r"playlist/([0-9a-fA-F-]{36})")

# Characters not allowed in filenames on Windows (and "/" everywhere)
_INVALID_CHARS_PATTERN = re.compile(r'[<>:"/\\|?*]+')


def extract_playlist_id(url: str) -> str | None:
    """
    Extract the playlist ID from a TIDAL playlist URL.

    Args:
        url: A TIDAL URL such as
             "https://tidal.com/browse/playlist/0a1b2c3d-4e5f-6789-abcd-ef0123456789".

    Returns:
        The 36-character playlist ID, or None if the string contains no
        "playlist/<id>" segment.

    Examples:
        extract_playlist_id("https://tidal.com/playlist/0a1b2c3d-4e5f-6789-abcd-ef0123456789")
        # "0a1b2c3d-4e5f-6789-abcd-ef0123456789"

        extract_playlist_id("https://tidal.com/album/12345")
        # None
    """
    if not isinstance(url, str):
        return None
    match = _PLAYLIST_ID_PATTERN.search(url)
    return match.group(1) if match else None


def sanitize_filename(name: str) -> str:
    """
    Sanitize a string for use as a file or directory name.

    Every run of the characters <>:"/\\|?* is replaced with a single
    underscore and surrounding whitespace is trimmed.

    Examples:
        sanitize_filename("Chill: Vibes?")   # "Chill_ Vibes_"
        sanitize_filename("  AC/DC  ")       # "AC_DC"
        sanitize_filename("")                # "Unknown"
    """
    result = _INVALID_CHARS_PATTERN.sub("_", name or "").strip()
    return result if result else "Unknown"


def truncate(text: str, length: int = 40) -> str:
    """Shorten text for terminal display so status lines don't wrap."""
    return text[:length] + "..." if len(text) > length else text


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it and its parents if necessary.

    Returns:
        The same path (for chaining).
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
