"""
Spotify API client for ssdl.

This module handles authentication and resource fetching against the
Spotify Web API using the Client Credentials flow (no user login).

Architecture:
    - authenticate() exchanges the client id/secret for an access token
      and returns an explicit SpotifySession (token + expiry time).
    - SpotifyClient owns its session. Before every request it checks
      whether the session is still valid and re-authenticates if not,
      then calls spotipy with the current token.
    - All spotipy and requests exceptions are wrapped in FetchError
      (or AuthError when the credentials are rejected).

Usage:
    from ssdl.spotify import SpotifyClient, parse_spotify_url

    client = SpotifyClient(client_id, client_secret)
    client.connect()
    link = parse_spotify_url("https://open.spotify.com/playlist/...")
    playlist = client.get_playlist(link.id)
"""

import re
import time
from dataclasses import dataclass
from typing import Any, Callable

import requests
import spotipy

from ssdl.core.constants import (
    SEARCH_RESULT_LIMIT,
    SPOTIFY_TOKEN_URL,
    TOKEN_EXPIRY_MARGIN,
)
from ssdl.core.exceptions import AuthError, FetchError
from ssdl.core.logger import get_logger
from ssdl.spotify.models import Collection, ResourceKind, SpotifyLink, Track

logger = get_logger(__name__)


REQUEST_TIMEOUT = 10

_WEB_LINK = re.compile(
    r"open\.spotify\.com/(?:intl-[a-z]{2}(?:-[a-zA-Z]{2})?/)?(track|album|playlist)/([a-zA-Z0-9]+)"
)
_URI_LINK = re.compile(r"spotify:(track|album|playlist):([a-zA-Z0-9]+)")


def parse_spotify_url(url: str) -> SpotifyLink | None:
    """
    Parse a Spotify link into its kind and ID.

    Args:
        url: One of:
             - https://open.spotify.com/track/ID (also /album/, /playlist/)
             - https://open.spotify.com/intl-de/track/ID
             - spotify:track:ID (also album, playlist)
             Query strings such as ?si=... are ignored.

    Returns:
        SpotifyLink, or None if the text is not a supported Spotify link.

    Example:
        parse_spotify_url("spotify:album:1DFixLWuPkv3KT3TnV35m3")
        # SpotifyLink(kind=ResourceKind.ALBUM, id="1DFixLWuPkv3KT3TnV35m3")
    """
    for pattern in (_WEB_LINK, _URI_LINK):
        match = pattern.search(url.strip())
        if match:
            return SpotifyLink(kind=ResourceKind(match.group(1)), id=match.group(2))
    return None


# =============================================================================
# Authentication
# =============================================================================

@dataclass(frozen=True)
class SpotifySession:
    """
    An access token and the time it stops being usable.

    Attributes:
        token: Bearer token for the Web API.
        expires_at: Unix timestamp after which the token must be refreshed.
                    Already reduced by TOKEN_EXPIRY_MARGIN.
    """
    token: str
    expires_at: float

    def is_valid(self, now: float | None = None) -> bool:
        """True while now < expires_at."""
        if now is None:
            now = time.time()
        return now < self.expires_at


def authenticate(
    client_id: str,
    client_secret: str,
    clock: Callable[[], float] = time.time
) -> SpotifySession:
    """
    Exchange client credentials for an access token.

    Args:
        client_id: Spotify application client ID.
        client_secret: Spotify application client secret.
        clock: Source of the current time (injectable for tests).

    Returns:
        A new SpotifySession.

    Raises:
        AuthError: If Spotify rejects the credentials (HTTP 4xx).
        FetchError: If Spotify cannot be reached or answers unexpectedly.
    """
    try:
        response = requests.post(
            SPOTIFY_TOKEN_URL,
            data={"grant_type": "client_credentials"},
            auth=(client_id, client_secret),
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise FetchError(
            f"Could not reach Spotify: {e}",
            details={"original_error": str(e)}
        ) from e

    if 400 <= response.status_code < 500:
        raise AuthError(
            f"Spotify auth failed: {_error_description(response)}",
            details={"status_code": response.status_code}
        )
    if not response.ok:
        raise FetchError(
            f"Spotify auth failed: {response.status_code} {response.reason}",
            details={"status_code": response.status_code},
            status_code=response.status_code
        )

    try:
        data = response.json()
        token = data["access_token"]
        expires_in = int(data.get("expires_in", 3600))
    except (ValueError, KeyError, TypeError) as e:
        raise FetchError(
            "Unexpected response from Spotify token endpoint",
            details={"original_error": str(e)}
        ) from e

    logger.debug(f"Authenticated with Spotify, token valid for {expires_in}s")
    return SpotifySession(token=token, expires_at=clock() + expires_in - TOKEN_EXPIRY_MARGIN)


def _error_description(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if isinstance(body, dict) and body.get("error_description"):
        return body["error_description"]
    return response.reason or str(response.status_code)


# =============================================================================
# Resource client
# =============================================================================

class SpotifyClient:
    """
    Fetches tracks, playlists and albums from Spotify.

    The client holds the credentials and the current session. Every
    request goes through _api(), which re-authenticates when the session
    has expired.

    Attributes:
        session: Current SpotifySession, or None before connect().

    Example:
        client = SpotifyClient(client_id, client_secret)
        client.connect()  # Raises AuthError on bad credentials
        for track in client.search_tracks("bohemian rhapsody"):
            print(track.display_name)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        clock: Callable[[], float] = time.time
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._clock = clock
        self.session: SpotifySession | None = None
        self._spotify: spotipy.Spotify | None = None

    def connect(self) -> SpotifySession:
        """
        Authenticate and create the underlying spotipy client.

        Raises:
            AuthError: If the credentials are rejected.
            FetchError: If Spotify cannot be reached.
        """
        self.session = authenticate(self._client_id, self._client_secret, clock=self._clock)
        self._spotify = spotipy.Spotify(
            auth=self.session.token,
            requests_timeout=REQUEST_TIMEOUT,
            retries=3,
        )
        return self.session

    def _api(self) -> spotipy.Spotify:
        if self.session is None or self._spotify is None or not self.session.is_valid(self._clock()):
            logger.debug("Spotify session missing or expired, re-authenticating")
            self.connect()
        return self._spotify

    def _call(self, what: str, func: Callable[[spotipy.Spotify], Any]) -> Any:
        """
        Run one spotipy call, translating its errors.

        Args:
            what: Description used in error messages ("track abc").
            func: Receives the spotipy client and performs the request.

        Raises:
            FetchError: On any spotipy or network failure, including a
                        rejected re-authentication after the session expired.
        """
        try:
            api = self._api()
        except AuthError as e:
            raise FetchError(
                f"Spotify re-authentication failed: {e.message}",
                details={"resource": what, "original_error": str(e)}
            ) from e
        try:
            result = func(api)
        except spotipy.SpotifyException as e:
            if e.http_status == 404:
                message = f"Not found on Spotify: {what}"
            elif e.http_status == 401:
                message = "Spotify token expired. Re-authenticate."
            elif e.http_status == 429:
                message = "Rate limited by Spotify. Try again in a moment."
            else:
                message = f"Spotify API error: {e.http_status} {e.msg}"
            raise FetchError(
                message,
                details={"resource": what, "original_error": str(e)},
                status_code=e.http_status
            ) from e
        except requests.RequestException as e:
            raise FetchError(
                f"Network error while fetching {what}: {e}",
                details={"resource": what, "original_error": str(e)}
            ) from e

        if result is None:
            raise FetchError(f"Not found on Spotify: {what}", details={"resource": what})
        return result

    def _all_items(self, what: str, first_page: dict[str, Any]) -> list[dict[str, Any]]:
        """Collect items from a paging object, following 'next' links."""
        items = list(first_page.get("items") or [])
        page = first_page
        while page.get("next"):
            page = self._call(what, lambda api, page=page: api.next(page))
            items.extend(page.get("items") or [])
        return items

    # =========================================================================
    # Public API
    # =========================================================================

    def get_track(self, track_id: str) -> Track:
        """
        Fetch a single track.

        Raises:
            FetchError: If the track cannot be fetched.
        """
        data = self._call(f"track {track_id}", lambda api: api.track(track_id))
        return Track.from_spotify_api(data)

    def get_playlist(self, playlist_id: str) -> Collection:
        """
        Fetch a playlist with all of its tracks (follows pagination).

        Raises:
            FetchError: If the playlist cannot be fetched (private, missing...).
        """
        what = f"playlist {playlist_id}"
        data = self._call(what, lambda api: api.playlist(playlist_id))
        items = self._all_items(what, data.get("tracks") or {})
        collection = Collection.from_playlist(data, items)
        logger.info(f"Fetched playlist '{collection.name}' with {collection.track_count} tracks")
        return collection

    def get_album(self, album_id: str) -> Collection:
        """
        Fetch an album with all of its tracks (follows pagination).

        Raises:
            FetchError: If the album cannot be fetched.
        """
        what = f"album {album_id}"
        data = self._call(what, lambda api: api.album(album_id))
        items = self._all_items(what, data.get("tracks") or {})
        collection = Collection.from_album(data, items)
        logger.info(f"Fetched album '{collection.name}' with {collection.track_count} tracks")
        return collection

    def search_tracks(self, query: str, limit: int = SEARCH_RESULT_LIMIT) -> list[Track]:
        """
        Search Spotify for tracks.

        Args:
            query: Free-text search.
            limit: Maximum number of results.

        Returns:
            Matching tracks, best match first. Empty if nothing matched.

        Raises:
            FetchError: If the search request fails.
        """
        data = self._call(
            f"search '{query}'",
            lambda api: api.search(q=query, type="track", limit=limit)
        )
        items = (data.get("tracks") or {}).get("items") or []
        return [Track.from_spotify_api(item) for item in items if item]
