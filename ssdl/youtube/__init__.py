"""
YouTube Music integration module for ssdl.

This module provides functionality for finding an audio source on
YouTube Music for a Spotify track.

Components:
    - YouTubeResolver: Search and pick the best source by duration
    - SourceMatch / MatchConfidence: The chosen source and how it was chosen
    - SearchCandidate: One parsed search result

Usage:
    from ssdl.youtube import YouTubeResolver

    match = YouTubeResolver().resolve(track.title, track.artist, track.duration_ms)
"""

from ssdl.youtube.models import MatchConfidence, SearchCandidate, SourceMatch
from ssdl.youtube.resolver import YouTubeResolver, select_best_candidate

__all__ = [
    "YouTubeResolver",
    "select_best_candidate",
    "MatchConfidence",
    "SearchCandidate",
    "SourceMatch",
]
