"""
Utility functions for ssdl.

This module provides common utility functions used across the application:
    - Filename sanitization (using yt-dlp's sanitize_filename)
    - Path helpers
    - Display formatting (re-exported from ssdl.utils.format)

Usage:
    from ssdl.utils import (
        sanitize_filename,
        ensure_directory,
        format_duration
    )
"""

import re
from pathlib import Path

from yt_dlp.utils import sanitize_filename as yt_dlp_sanitize

from ssdl.utils.format import (
    format_bytes,
    format_duration,
    format_elapsed,
    truncate,
)

__all__ = [
    "sanitize_filename",
    "track_basename",
    "ensure_directory",
    "format_bytes",
    "format_duration",
    "format_elapsed",
    "truncate",
]


_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_filename(name: str) -> str:
    """
    Sanitize a string for use as a filename.

    Uses yt-dlp's sanitize_filename function for consistency with
    how yt-dlp names downloaded files.

    Args:
        name: The string to sanitize (e.g., "Title — Artist").

    Returns:
        Sanitized string safe for use in filenames, never empty.

    Sanitization Rules:
        - Path separators and characters invalid on Windows are replaced
        - Runs of whitespace collapse to a single space
        - Leading/trailing spaces and dots are trimmed
        - An empty result becomes "untitled"

    Examples:
        sanitize_filename("B — Y")          # "B — Y"
        sanitize_filename("AC/DC  Live")    # no "/" and single spaces
    """
    cleaned = yt_dlp_sanitize(name, restricted=False)
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned).strip(" .")
    return cleaned or "untitled"


def track_basename(title: str, artist: str) -> str:
    """
    Build the file stem for a downloaded track: "Title — Artist".

    Example:
        track_basename("B", "Y")  # "B — Y"
    """
    return sanitize_filename(f"{title} — {artist}")


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If directory cannot be created (permissions, etc.)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
