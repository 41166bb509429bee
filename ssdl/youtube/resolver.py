"""
Audio source resolver using YouTube Music search.

For each Spotify track the resolver searches YouTube Music for
"{title} {artist}" restricted to songs, then picks a candidate by duration:

    1. Sort song candidates by |candidate duration - track duration|.
    2. If the nearest is within DURATION_TOLERANCE_SECONDS, it is a
       VERIFIED match.
    3. Otherwise the first candidate in search order is used
       (BEST_GUESS): search relevance beats a duration that is off anyway.
    4. With no song candidates at all, search videos for
       "{title} {artist} audio" and take the first result as a LOW
       confidence match.

Nothing found at all raises ResolveError("No match found").
"""

from typing import Any

from ytmusicapi import YTMusic

from ssdl.core.constants import DURATION_TOLERANCE_SECONDS
from ssdl.core.exceptions import ResolveError
from ssdl.core.logger import get_logger
from ssdl.youtube.models import MatchConfidence, SearchCandidate, SourceMatch

logger = get_logger(__name__)


NO_MATCH_MESSAGE = "No match found"


def select_best_candidate(
    candidates: list[SearchCandidate],
    duration_ms: int | None,
    tolerance: float = DURATION_TOLERANCE_SECONDS
) -> SourceMatch | None:
    """
    Choose a source among song candidates.

    Args:
        candidates: Candidates in search order.
        duration_ms: Track duration, or None/0 if unknown.
        tolerance: Maximum difference in seconds for a VERIFIED match.

    Returns:
        The chosen SourceMatch, or None if there are no candidates.

    Example:
        # Target 200s, candidates at 240s and 203s -> the 203s one, VERIFIED
    """
    if not candidates:
        return None

    if duration_ms:
        target = duration_ms / 1000
        nearest = min(candidates, key=lambda c: abs(c.duration_seconds - target))
        if abs(nearest.duration_seconds - target) <= tolerance:
            return SourceMatch(
                url=nearest.url,
                duration_seconds=nearest.duration_seconds,
                confidence=MatchConfidence.VERIFIED,
                title=nearest.title,
            )

    first = candidates[0]
    return SourceMatch(
        url=first.url,
        duration_seconds=first.duration_seconds,
        confidence=MatchConfidence.BEST_GUESS,
        title=first.title,
    )


class YouTubeResolver:
    """
    Finds a downloadable source for a track on YouTube Music.

    The ytmusicapi client is created on first use so that constructing a
    resolver never touches the network.

    Example:
        resolver = YouTubeResolver()
        match = resolver.resolve("Bohemian Rhapsody", "Queen", 354000)
        print(match.url, match.confidence)
    """

    def __init__(self, ytmusic: YTMusic | None = None) -> None:
        self._ytmusic = ytmusic

    @property
    def ytmusic(self) -> YTMusic:
        if self._ytmusic is None:
            self._ytmusic = YTMusic(language="en")
        return self._ytmusic

    def resolve(self, title: str, artist: str, duration_ms: int | None) -> SourceMatch:
        """
        Find the best source for a track.

        Args:
            title: Track title.
            artist: Artist name(s).
            duration_ms: Track duration in milliseconds, if known.

        Returns:
            The chosen SourceMatch.

        Raises:
            ResolveError: If no candidate is found or every search fails.
        """
        query = f"{title} {artist}"

        try:
            songs = self._search(query, "songs")
        except Exception as e:
            logger.warning(f"Song search failed for '{query}': {e}")
            songs = []

        match = select_best_candidate(songs, duration_ms)
        if match is not None:
            logger.debug(f"Matched '{query}' -> {match.url} ({match.confidence.value})")
            return match

        fallback_query = f"{query} audio"
        try:
            videos = self._search(fallback_query, "videos")
        except Exception as e:
            raise ResolveError(
                f"Search failed: {e}",
                details={"query": fallback_query, "original_error": str(e)}
            ) from e

        if not videos:
            raise ResolveError(NO_MATCH_MESSAGE, details={"query": query})

        first = videos[0]
        logger.debug(f"Low confidence match for '{query}' -> {first.url}")
        return SourceMatch(
            url=first.url,
            duration_seconds=first.duration_seconds or (duration_ms or 0) / 1000,
            confidence=MatchConfidence.LOW,
            title=first.title,
        )

    def _search(self, query: str, search_filter: str) -> list[SearchCandidate]:
        raw_results: list[dict[str, Any]] = self.ytmusic.search(query, filter=search_filter, limit=10)
        return [
            SearchCandidate.from_ytmusic_result(raw)
            for raw in raw_results or []
            if raw.get("videoId")
        ]
