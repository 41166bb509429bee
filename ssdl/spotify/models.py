"""
Data models for Spotify entities.

This module defines immutable dataclasses representing the Spotify objects
ssdl works with: tracks and track collections (playlists and albums), plus
the parsed form of a Spotify link.

Design Decisions:
    - All dataclasses are frozen (immutable) to prevent accidental modification
    - Tracks are normalized to the fields the pipeline needs, whatever
      endpoint they came from
    - Optional fields default to None when Spotify does not provide them

Usage:
    from ssdl.spotify.models import Track, Collection

    track = Track.from_spotify_api(client.track(track_id))
    print(f"{track.title} - {track.artist}")
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResourceKind(str, Enum):
    """Kinds of Spotify links ssdl can download."""
    TRACK = "track"
    ALBUM = "album"
    PLAYLIST = "playlist"


@dataclass(frozen=True)
class SpotifyLink:
    """
    A parsed Spotify link.

    Attributes:
        kind: Track, album or playlist.
        id: Base62 Spotify ID.
    """
    kind: ResourceKind
    id: str


def _join_artists(artists: list[dict[str, Any]] | None) -> str:
    names = [a.get("name") for a in artists or [] if a.get("name")]
    return ", ".join(names) if names else "Unknown Artist"


def _first_image(images: list[dict[str, Any]] | None) -> str | None:
    # Spotify lists images largest first
    if images:
        return images[0].get("url")
    return None


@dataclass(frozen=True)
class Track:
    """
    Immutable representation of a Spotify track.

    Contains the metadata needed for:
        - Source matching (title, artist, duration_ms)
        - File naming (title, artist)
        - Tag writing (all fields)

    Attributes:
        id: Spotify track ID.
        title: Track title.
        artist: All artist names joined with ", ".
        album: Album name.
        duration_ms: Duration in milliseconds.
        artwork_url: Largest album cover URL, if any.
        release_date: Album release date ("YYYY", "YYYY-MM" or "YYYY-MM-DD").
        track_number: Position on the album.
        url: open.spotify.com link to the track.
    """
    id: str
    title: str
    artist: str
    album: str
    duration_ms: int
    artwork_url: str | None = None
    release_date: str | None = None
    track_number: int | None = None
    url: str | None = None

    @classmethod
    def from_spotify_api(
        cls,
        track_data: dict[str, Any],
        album_data: dict[str, Any] | None = None
    ) -> "Track":
        """
        Create a Track from a Spotify API track object.

        Args:
            track_data: A full track object, or a simplified track object
                        from an album's track listing.
            album_data: The album object to take album fields from.
                        Required for simplified tracks, which carry no album.
                        If None, the album embedded in track_data is used.

        Returns:
            Track populated with the normalized fields.
        """
        album = album_data if album_data is not None else track_data.get("album") or {}

        return cls(
            id=track_data.get("id") or "",
            title=track_data.get("name") or "Unknown Title",
            artist=_join_artists(track_data.get("artists")),
            album=album.get("name") or "Unknown Album",
            duration_ms=track_data.get("duration_ms") or 0,
            artwork_url=_first_image(album.get("images")),
            release_date=album.get("release_date") or None,
            track_number=track_data.get("track_number"),
            url=(track_data.get("external_urls") or {}).get("spotify"),
        )

    @property
    def year(self) -> str | None:
        """Release year, or None if unknown."""
        if self.release_date and len(self.release_date) >= 4:
            return self.release_date[:4]
        return None

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000

    @property
    def display_name(self) -> str:
        return f"{self.title} - {self.artist}"


@dataclass(frozen=True)
class Collection:
    """
    A playlist or album with its tracks.

    Attributes:
        kind: ResourceKind.PLAYLIST or ResourceKind.ALBUM.
        name: Playlist or album name.
        tracks: Tracks in playlist/album order.
        owner: Playlist owner display name (playlists only).
        artist: Album artists joined with ", " (albums only).
        release_date: Album release date (albums only).
        description: Playlist description (playlists only).
        artwork_url: Largest cover image URL, if any.
    """
    kind: ResourceKind
    name: str
    tracks: tuple[Track, ...]
    owner: str | None = None
    artist: str | None = None
    release_date: str | None = None
    description: str | None = None
    artwork_url: str | None = None

    @classmethod
    def from_playlist(cls, data: dict[str, Any], items: list[dict[str, Any]]) -> "Collection":
        """
        Create a playlist Collection.

        Args:
            data: Playlist object from Spotify.
            items: All playlist item wrappers ({"track": {...}, ...}) after
                   pagination. Items without a track, local files and
                   non-track entries (podcast episodes) are skipped.
        """
        tracks = tuple(
            Track.from_spotify_api(item["track"])
            for item in items
            if item.get("track")
            and not item.get("is_local")
            and item["track"].get("type", "track") == "track"
        )
        return cls(
            kind=ResourceKind.PLAYLIST,
            name=data.get("name") or "Unknown Playlist",
            tracks=tracks,
            owner=(data.get("owner") or {}).get("display_name"),
            description=data.get("description") or None,
            artwork_url=_first_image(data.get("images")),
        )

    @classmethod
    def from_album(cls, data: dict[str, Any], items: list[dict[str, Any]]) -> "Collection":
        """
        Create an album Collection.

        Args:
            data: Album object from Spotify.
            items: All simplified track objects of the album after pagination.
        """
        tracks = tuple(Track.from_spotify_api(item, album_data=data) for item in items)
        return cls(
            kind=ResourceKind.ALBUM,
            name=data.get("name") or "Unknown Album",
            tracks=tracks,
            artist=_join_artists(data.get("artists")),
            release_date=data.get("release_date") or None,
            artwork_url=_first_image(data.get("images")),
        )

    @property
    def track_count(self) -> int:
        return len(self.tracks)
