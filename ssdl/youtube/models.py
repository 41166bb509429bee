"""
Data models for YouTube Music search results.

This module defines:
    - SearchCandidate: One parsed ytmusicapi search result
    - SourceMatch: The source chosen for a track, with a confidence level
    - MatchConfidence: How much the choice can be trusted

Confidence Levels:
    VERIFIED    Song result whose duration is within the tolerance window.
    BEST_GUESS  Song result outside the tolerance window (first in search order).
    LOW         Fallback video search result with no duration check at all.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


def _clock_to_seconds(text: str | None) -> int:
    """
    Convert a YouTube Music clock string ("3:33", "1:02:15") to seconds.

    Anything else, including None, gives 0.
    """
    fields = (text or "").split(":")
    if not 2 <= len(fields) <= 3 or not all(field.isdigit() for field in fields):
        return 0

    total = 0
    for field in fields:
        total = total * 60 + int(field)
    return total


class MatchConfidence(str, Enum):
    """How the source for a track was chosen."""
    VERIFIED = "verified"
    BEST_GUESS = "best_guess"
    LOW = "low"


@dataclass(frozen=True)
class SearchCandidate:
    """
    One YouTube Music search result.

    Attributes:
        video_id: YouTube video ID (11 characters).
        url: Watch URL (music.youtube.com for songs, youtube.com for videos).
        title: Result title.
        duration_seconds: Duration in seconds (0 if unknown).
        result_type: "song" or "video".
    """
    video_id: str
    url: str
    title: str
    duration_seconds: int
    result_type: str = "video"

    @classmethod
    def from_ytmusic_result(cls, result: dict[str, Any]) -> "SearchCandidate":
        """
        Create a SearchCandidate from a ytmusicapi search result.

        The clock string under "duration" wins; the numeric
        "duration_seconds" field some results carry is the fallback.
        """
        video_id = result.get("videoId") or ""
        result_type = result.get("resultType") or "video"
        if result_type == "song":
            url = f"https://music.youtube.com/watch?v={video_id}"
        else:
            url = f"https://www.youtube.com/watch?v={video_id}"

        duration_seconds = _clock_to_seconds(result.get("duration"))
        fallback = result.get("duration_seconds")
        if not duration_seconds and isinstance(fallback, (int, float)):
            duration_seconds = int(fallback)

        return cls(
            video_id=video_id,
            url=url,
            title=result.get("title") or "",
            duration_seconds=duration_seconds,
            result_type=result_type,
        )


@dataclass(frozen=True)
class SourceMatch:
    """
    The audio source chosen for a track.

    Attributes:
        url: URL handed to the downloader.
        duration_seconds: Duration of the source (the track's own duration
                          when the source does not report one).
        confidence: How the source was chosen.
        title: Title of the source as found on YouTube.
    """
    url: str
    duration_seconds: float
    confidence: MatchConfidence
    title: str = ""

    @property
    def is_low_confidence(self) -> bool:
        return self.confidence is MatchConfidence.LOW
