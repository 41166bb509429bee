"""Tests for the screens: frame contents and key handling"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from ssdl.core.config import Config
from ssdl.core.exceptions import FetchError, SetupCancelled
from ssdl.download.pipeline import DownloadResult, TrackState, TrackStatus
from ssdl.screens import (
    CompleteAction,
    DownloadingView,
    MainAction,
    SettingsAction,
    next_audio_format,
    prompt_credentials,
    show_complete,
    show_directory_input,
    show_preview,
    show_search,
    show_settings,
    show_track_list,
    show_url_input,
    show_welcome,
)
from ssdl.screens.common import message_frame
from ssdl.screens.complete import complete_frame
from ssdl.screens.credentials import credentials_frame
from ssdl.screens.downloading import active_index, downloading_frame
from ssdl.screens.preview import preview_frame
from ssdl.screens.search import results_frame
from ssdl.screens.track_list import collection_header, track_list_frame
from ssdl.screens.url_input import url_frame
from ssdl.screens.welcome import welcome_frame
from ssdl.spotify.models import Collection, ResourceKind
from ssdl.tui.style import strip_ansi
from ssdl.youtube.models import MatchConfidence

from fakes import DOWN, ENTER, ESC, SPACE, UP, make_track, scripted_dispatcher, typed


def plain(frame):
    return strip_ansi(frame)


class TestWelcome:
    """Test the main menu"""

    def test_frame_marks_selection(self):
        """The highlighted item carries the pointer"""
        frame = plain(welcome_frame(["Download from URL", "Exit"], 1))
        assert "> Exit" in frame
        assert "> Download" not in frame
        assert "Spotify Song Downloader" in frame

    @pytest.mark.parametrize("keystrokes, action", [
        ([ENTER], MainAction.URL),
        ([DOWN, ENTER], MainAction.SEARCH),
        ([UP, ENTER], MainAction.EXIT),
        ([ESC], MainAction.EXIT),
    ])
    def test_actions(self, renderer, keystrokes, action):
        """Menu choices map to actions, Escape exits"""
        keys = scripted_dispatcher(*keystrokes)
        assert show_welcome(keys, renderer) is action


class TestUrlInput:
    """Test URL entry"""

    def test_empty_shows_supported_forms(self):
        """Hints are shown before anything is typed"""
        frame = plain(url_frame(""))
        assert "Supported:" in frame
        assert "open.spotify.com/playlist/..." in frame

    def test_live_validation(self):
        """Typed text is classified as it is entered"""
        assert "Valid album URL" in plain(url_frame("https://open.spotify.com/album/abc"))
        assert "Invalid Spotify URL" in plain(url_frame("https://example.com"))

    def test_returns_trimmed_url(self, renderer):
        """Submitted text is stripped"""
        keys = scripted_dispatcher(*typed("  spotify:track:abc "), ENTER)
        assert show_url_input(keys, renderer) == "spotify:track:abc"

    @pytest.mark.parametrize("keystrokes", [[ESC], [ENTER], [*typed("   "), ENTER]])
    def test_cancel_or_empty(self, renderer, keystrokes):
        """Escape and blank input return None"""
        keys = scripted_dispatcher(*keystrokes)
        assert show_url_input(keys, renderer) is None


class TestSearch:
    """Test the search flow"""

    def test_choose_result(self, renderer, sample_tracks):
        """Query, search, pick the second result"""
        client = Mock(search_tracks=Mock(return_value=sample_tracks))
        keys = scripted_dispatcher(*typed("song"), ENTER, DOWN, ENTER)

        track = show_search(keys, renderer, client)

        assert track is sample_tracks[1]
        client.search_tracks.assert_called_once_with("song", limit=10)
        assert any("Searching Spotify..." in frame for frame in renderer.plain_frames())

    def test_no_results(self, renderer):
        """An empty result list shows a warning"""
        client = Mock(search_tracks=Mock(return_value=[]))
        keys = scripted_dispatcher(*typed("zzz"), ENTER, ENTER)

        assert show_search(keys, renderer, client) is None
        assert 'No results for "zzz"' in renderer.last

    def test_search_failure(self, renderer):
        """Fetch errors are reported, not raised"""
        client = Mock(search_tracks=Mock(side_effect=FetchError("Network error")))
        keys = scripted_dispatcher(*typed("x"), ENTER, ENTER)

        assert show_search(keys, renderer, client) is None
        assert "Search failed: Network error" in renderer.last

    def test_results_details_panel(self, sample_tracks):
        """The highlighted track's details are shown under the list"""
        frame = plain(results_frame("q", sample_tracks, 1, capacity=10))
        assert 'Results for "q"' in frame
        assert "Title:    B" in frame
        assert "Duration: 3:00" in frame

    def test_results_window(self):
        """Long result lists are windowed around the selection"""
        tracks = [make_track(f"Song {n}", "Band") for n in range(10)]
        frame = plain(results_frame("q", tracks, 9, capacity=3))
        assert "Song 0" not in frame
        assert "8-10 of 10 · 7 above" in frame


class TestPreview:
    """Test the single track preview"""

    def test_frame(self):
        """Details are boxed"""
        frame = plain(preview_frame(make_track("B", "Y", 180000, release_date="2020-01-01")))
        assert "Track found" in frame
        assert "3:00 | 2020" in frame

    @pytest.mark.parametrize("key, expected", [(ENTER, True), (ESC, False)])
    def test_keys(self, renderer, key, expected):
        """Enter downloads, Escape goes back"""
        keys = scripted_dispatcher("x", key)
        assert show_preview(keys, renderer, make_track()) is expected


class TestTrackList:
    """Test the selection table"""

    def test_header_for_playlist(self, sample_playlist):
        """Playlists show owner, count and total duration"""
        lines = [plain(line) for line in collection_header(sample_playlist)]
        assert lines[0].strip() == "Playlist: Road Trip"
        assert lines[1].strip() == "by alice | 5 tracks | 15:15"

    def test_header_for_album(self):
        """Albums show artist, count and year"""
        album = Collection(
            kind=ResourceKind.ALBUM, name="LP", tracks=(make_track(),),
            artist="Band", release_date="2001-05-01",
        )
        lines = [plain(line) for line in collection_header(album)]
        assert lines[0].strip() == "Album: LP"
        assert lines[1].strip() == "by Band | 1 tracks | 2001"

    def test_frame_counts_selection(self, sample_playlist):
        """The footer shows how many tracks are checked"""
        frame = plain(track_list_frame(sample_playlist, sample_playlist.tracks, 0, {0, 2}, capacity=15))
        assert "2/5 selected" in frame
        assert "Song 5" in frame

    def test_frame_window(self, sample_playlist):
        """Rows outside the window are hidden and counted"""
        frame = plain(track_list_frame(sample_playlist, sample_playlist.tracks, 4, set(), capacity=2))
        assert "Song 1" not in frame
        assert "4-5 of 5 · 3 above" in frame

    def test_deselect_and_confirm(self, renderer, sample_playlist):
        """Unchecked tracks are left out, order is kept"""
        keys = scripted_dispatcher(DOWN, SPACE, DOWN, SPACE, ENTER)

        selected = show_track_list(keys, renderer, sample_playlist)

        assert [track.title for track in selected] == ["Song 1", "Song 4", "Song 5"]

    def test_select_none(self, renderer, sample_playlist):
        """Toggling all off and confirming gives an empty list"""
        keys = scripted_dispatcher("a", ENTER)
        assert show_track_list(keys, renderer, sample_playlist) == []

    def test_cancel(self, renderer, sample_playlist):
        """Escape cancels the selection"""
        keys = scripted_dispatcher(SPACE, ESC)
        assert show_track_list(keys, renderer, sample_playlist) is None


class TestDownloading:
    """Test the progress view"""

    def test_active_index(self):
        """The view follows the track being worked on"""
        statuses = [TrackStatus(TrackState.DONE), TrackStatus(TrackState.DOWNLOADING), TrackStatus()]
        assert active_index(statuses) == 1
        assert active_index([TrackStatus(TrackState.DONE), TrackStatus(TrackState.ERROR), TrackStatus()]) == 2

    def test_frame_rows(self, sample_tracks):
        """Each state has its own row text"""
        statuses = [
            TrackStatus(TrackState.ERROR, message="No match found on YouTube"),
            TrackStatus(TrackState.DOWNLOADING, percent=50.0, message="1.2MiB/s"),
        ]

        frame = plain(downloading_frame(sample_tracks, statuses, 65, rows=40))

        assert "Downloading 1/2" in frame
        assert "x  A - X" in frame
        assert "No match found on YouTube" in frame
        assert "50%" in frame
        assert "Elapsed 1:05 | 1 failed | Ctrl+C quit" in frame

    def test_waiting_and_done_rows(self, sample_tracks):
        """Queued tracks wait, finished ones show their size"""
        statuses = [TrackStatus(TrackState.DONE, file_size=2048), TrackStatus()]
        frame = plain(downloading_frame(sample_tracks, statuses, 0, rows=40))
        assert "2.0 KB" in frame
        assert "waiting" in frame

    def test_view_uses_clock(self, renderer, sample_tracks):
        """Elapsed time is measured from view creation"""
        now = [10.0]
        view = DownloadingView(renderer, sample_tracks, clock=lambda: now[0])
        now[0] = 75.0

        view.update([TrackStatus(), TrackStatus()])

        assert view.elapsed == 65.0
        assert "Elapsed 1:05" in renderer.last


class TestComplete:
    """Test the summary screen"""

    def results(self, sample_tracks):
        return [
            DownloadResult(sample_tracks[0], success=False, error="No match found on YouTube"),
            DownloadResult(sample_tracks[1], success=True, file_path=Path("B — Y.mp3"),
                           file_size=1234, confidence=MatchConfidence.LOW),
        ]

    def test_partial_failure(self, sample_tracks):
        """Failures are listed and low-confidence matches marked"""
        frame = plain(complete_frame(self.results(sample_tracks), Path("/music"), 5))

        assert "Downloads finished with 1 error(s)" in frame
        assert "Saved to: /music/" in frame
        assert "1. ? B - Y" in frame
        assert "Failed:" in frame
        assert "1/2 downloaded | 1.2 KB | 0:05" in frame

    def test_titles(self, sample_tracks):
        """The title reflects the outcome"""
        ok = [DownloadResult(track, success=True, file_size=1) for track in sample_tracks]
        failed = [DownloadResult(track, success=False, error="x") for track in sample_tracks]
        assert "All downloads complete!" in plain(complete_frame(ok, Path("/m"), 0))
        assert "All downloads failed" in plain(complete_frame(failed, Path("/m"), 0))

    @pytest.mark.parametrize("key, action", [
        (ENTER, CompleteAction.BACK),
        ("q", CompleteAction.QUIT),
        ("Q", CompleteAction.QUIT),
    ])
    def test_keys(self, renderer, sample_tracks, key, action):
        """Enter goes back, Q quits"""
        keys = scripted_dispatcher(key)
        assert show_complete(keys, renderer, self.results(sample_tracks), Path("/m"), 0) is action


class TestSettings:
    """Test the settings screens"""

    def test_next_audio_format(self):
        """Formats cycle and unknown values restart the cycle"""
        assert next_audio_format("mp3") == "m4a"
        assert next_audio_format("m4a") == "mp3"
        assert next_audio_format("wav") == "mp3"

    def test_menu(self, renderer, configured):
        """Rows show current values"""
        keys = scripted_dispatcher(DOWN, ENTER)

        assert show_settings(keys, renderer, configured) is SettingsAction.AUDIO_FORMAT
        assert "configured" in renderer.last

    def test_menu_initial_and_escape(self, renderer):
        """Menus can start on a row, Escape is Back"""
        keys = scripted_dispatcher(ENTER, ESC)
        assert show_settings(keys, renderer, Config(), initial=2) is SettingsAction.RESET_CREDENTIALS
        assert "not set" in renderer.last
        assert show_settings(keys, renderer, Config()) is SettingsAction.BACK

    def test_directory_input_edits_current(self, renderer):
        """The editor starts from the current directory"""
        keys = scripted_dispatcher(*typed("/new"), ENTER)
        assert show_directory_input(keys, renderer, "~/Music") == "~/Music/new"
        assert "Current: ~/Music" in renderer.last


class TestCredentials:
    """Test the first-run credential prompt"""

    def test_secret_is_masked(self):
        """Only the id prefix and mask characters are shown"""
        frame = plain(credentials_frame("secret", client_id="abcdefghijkl"))
        assert "Client ID: abcdefgh..." in frame
        assert "******" in frame
        assert "secret" not in frame.split("Client Secret:")[1]

    def test_prompt(self, renderer):
        """Both values are returned trimmed"""
        keys = scripted_dispatcher(*typed(" id "), ENTER, *typed("sec"), ENTER)
        assert prompt_credentials(keys, renderer) == ("id", "sec")

    @pytest.mark.parametrize("keystrokes", [[ESC], [*typed("id"), ENTER, ENTER]])
    def test_cancelled(self, renderer, keystrokes):
        """Escape or an empty value cancels setup"""
        keys = scripted_dispatcher(*keystrokes)
        with pytest.raises(SetupCancelled):
            prompt_credentials(keys, renderer)


class TestMessage:
    """Test the shared message frame"""

    def test_error_tone(self):
        frame = plain(message_frame("Failed to fetch: Not found", ["Check the link"]))
        assert "✗ Failed to fetch: Not found" in frame
        assert "Check the link" in frame
        assert frame.rstrip().endswith("Press Enter to go back")
