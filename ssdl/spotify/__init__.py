"""
Spotify integration module for ssdl.

This module provides:
    - SpotifyClient: Authenticated client for tracks, playlists, albums and search
    - SpotifySession / authenticate: Client Credentials token handling
    - parse_spotify_url: Recognize track/album/playlist links
    - Track, Collection: Normalized data models

Usage:
    from ssdl.spotify import SpotifyClient, Track, parse_spotify_url
"""

from ssdl.spotify.client import (
    SpotifyClient,
    SpotifySession,
    authenticate,
    parse_spotify_url,
)
from ssdl.spotify.models import Collection, ResourceKind, SpotifyLink, Track

__all__ = [
    "SpotifyClient",
    "SpotifySession",
    "authenticate",
    "parse_spotify_url",
    "Collection",
    "ResourceKind",
    "SpotifyLink",
    "Track",
]
