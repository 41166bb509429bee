"""
Screen flow controller for ssdl.

The App decides which screen is active based on application state:

    credentials missing? -> credential prompt (first run)
    authenticate         -> AuthError clears stored credentials and aborts
    initial URL given?   -> handle it and return (no menu)
    main menu loop       -> URL | Search | Settings | Exit

A URL or search result leads to track selection, the download pipeline
and the summary screen, which either returns to the menu or quits.

Collaborators (Spotify client, pipeline, sleep, clock) are injected so
the whole flow can be driven by scripted keys in tests.
"""

import time
from pathlib import Path
from typing import Callable, Sequence

from ssdl.core.config import Config, ConfigStore, apply_environment
from ssdl.core.exceptions import AuthError, ConfigError, DownloadError, FetchError
from ssdl.core.logger import get_logger
from ssdl.download.metadata import TagWriter
from ssdl.download.pipeline import DownloadPipeline
from ssdl.download.transfer import YtDlpTransfer
from ssdl.screens import (
    CompleteAction,
    DownloadingView,
    MainAction,
    SettingsAction,
    flash,
    next_audio_format,
    prompt_credentials,
    show_complete,
    show_directory_input,
    show_message,
    show_preview,
    show_search,
    show_settings,
    show_status,
    show_track_list,
    show_url_input,
    show_welcome,
)
from ssdl.spotify.client import SpotifyClient, parse_spotify_url
from ssdl.spotify.models import Collection, ResourceKind, Track
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.renderer import Renderer
from ssdl.youtube.resolver import YouTubeResolver

logger = get_logger(__name__)


ClientFactory = Callable[[str, str], SpotifyClient]
PipelineFactory = Callable[[Config], DownloadPipeline]


def build_pipeline(config: Config) -> DownloadPipeline:
    """Create the production pipeline for the configured audio settings."""
    return DownloadPipeline(
        resolver=YouTubeResolver(),
        transfer=YtDlpTransfer(audio_format=config.audio_format, audio_quality=config.audio_quality),
        tagger=TagWriter(),
    )


class App:
    """
    Runs the interactive session.

    Attributes:
        config: The stored configuration. Environment overrides are applied
                on top of it when read (see settings) and never saved.
        client: Connected Spotify client, set by run().

    Example:
        with KeyDispatcher(terminal) as keys:
            App(keys, Renderer(terminal), store, store.load()).run(url)
    """

    def __init__(
        self,
        keys: KeyDispatcher,
        renderer: Renderer,
        store: ConfigStore,
        config: Config,
        client_factory: ClientFactory = SpotifyClient,
        pipeline_factory: PipelineFactory = build_pipeline,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.keys = keys
        self.renderer = renderer
        self.store = store
        self.config = config
        self.client: SpotifyClient | None = None
        self._client_factory = client_factory
        self._pipeline_factory = pipeline_factory
        self._sleep = sleep
        self._clock = clock

    @property
    def settings(self) -> Config:
        """Effective configuration: stored values plus environment overrides."""
        return apply_environment(self.config, load_env_file=False)

    # =========================================================================
    # Entry point
    # =========================================================================

    def run(self, initial_url: str | None = None) -> None:
        """
        Run the session until the user exits.

        Raises:
            SetupCancelled: If the first-run credential prompt is cancelled.
            AuthError: If Spotify rejects the credentials (after clearing them).
            FetchError: If Spotify cannot be reached to authenticate.
            SystemExit: With code 0 when "quit" is chosen on the summary.
        """
        if not self.settings.has_credentials:
            self._prompt_credentials()

        self._connect()

        if initial_url:
            self._handle_url(initial_url)
            return

        while True:
            action = show_welcome(self.keys, self.renderer)
            logger.debug(f"Main menu: {action.value}")

            if action is MainAction.URL:
                url = show_url_input(self.keys, self.renderer)
                if url:
                    self._handle_url(url)
            elif action is MainAction.SEARCH:
                track = show_search(self.keys, self.renderer, self.client)
                if track is not None:
                    self._handle_tracks([track])
            elif action is MainAction.SETTINGS:
                self._settings()
            else:
                return

    # =========================================================================
    # Credentials and authentication
    # =========================================================================

    def _prompt_credentials(self) -> None:
        client_id, client_secret = prompt_credentials(self.keys, self.renderer)
        self.config = self.config.with_updates(
            spotify_client_id=client_id,
            spotify_client_secret=client_secret,
        )
        if self._save():
            flash(self.renderer, f"Credentials saved to {self.store.path}", sleep=self._sleep)

    def _connect(self) -> None:
        settings = self.settings
        show_status(self.renderer, "Authenticating with Spotify...")
        client = self._client_factory(settings.spotify_client_id, settings.spotify_client_secret)
        try:
            client.connect()
        except AuthError:
            logger.error("Spotify rejected the stored credentials, clearing them")
            self.config = self.config.without_credentials()
            try:
                self.store.save(self.config)
            except ConfigError as e:
                logger.warning(e.message)
            raise
        self.client = client
        logger.info("Authenticated with Spotify")

    def _save(self) -> bool:
        """Persist the config, showing a message if that fails."""
        try:
            self.store.save(self.config)
        except ConfigError as e:
            logger.warning(e.message)
            show_message(self.keys, self.renderer, e.message)
            return False
        return True

    # =========================================================================
    # URL and download flow
    # =========================================================================

    def _handle_url(self, url: str) -> None:
        link = parse_spotify_url(url)
        if link is None:
            show_message(
                self.keys,
                self.renderer,
                "Invalid Spotify URL",
                lines=["Supported: track, album and playlist links"],
            )
            return

        show_status(self.renderer, f"Fetching {link.kind.value} info...")
        try:
            if link.kind is ResourceKind.TRACK:
                track = self.client.get_track(link.id)
            elif link.kind is ResourceKind.PLAYLIST:
                collection = self.client.get_playlist(link.id)
            else:
                collection = self.client.get_album(link.id)
        except FetchError as e:
            logger.warning(f"Failed to fetch {url}: {e.message}")
            show_message(self.keys, self.renderer, f"Failed to fetch: {e.message}")
            return

        if link.kind is ResourceKind.TRACK:
            if show_preview(self.keys, self.renderer, track):
                self._handle_tracks([track])
            return

        if not collection.tracks:
            show_message(self.keys, self.renderer, f"No tracks found in {collection.name}", tone="warning")
            return

        self._handle_tracks(list(collection.tracks), collection)

    def _handle_tracks(self, tracks: Sequence[Track], collection: Collection | None = None) -> None:
        """
        Select, download and summarize.

        A single track (preview or search result) skips the selection table.
        """
        if collection is not None:
            selected = show_track_list(self.keys, self.renderer, collection)
            if not selected:
                return
        else:
            selected = list(tracks)

        settings = self.settings
        output_dir = settings.download_path
        pipeline = self._pipeline_factory(settings)
        view = DownloadingView(self.renderer, selected, clock=self._clock)

        logger.info(f"Downloading {len(selected)} track(s) to {output_dir}")
        try:
            results = pipeline.run(selected, output_dir, on_update=view.update)
        except DownloadError as e:
            logger.error(e.message)
            show_message(self.keys, self.renderer, e.message)
            return

        action = show_complete(self.keys, self.renderer, results, output_dir, view.elapsed)
        if action is CompleteAction.QUIT:
            raise SystemExit(0)

    # =========================================================================
    # Settings
    # =========================================================================

    def _settings(self) -> None:
        selected = 0
        while True:
            action = show_settings(self.keys, self.renderer, self.config, initial=selected)

            if action is SettingsAction.DOWNLOAD_DIR:
                selected = 0
                directory = show_directory_input(self.keys, self.renderer, self.config.download_dir)
                if directory is None:
                    continue
                self.config = self.config.with_updates(download_dir=str(Path(directory).expanduser()))
                if self._save():
                    flash(self.renderer, "Saved!", sleep=self._sleep)
            elif action is SettingsAction.AUDIO_FORMAT:
                selected = 1
                self.config = self.config.with_updates(
                    audio_format=next_audio_format(self.config.audio_format)
                )
                self._save()
            elif action is SettingsAction.RESET_CREDENTIALS:
                selected = 2
                self.config = self.config.without_credentials()
                if self._save():
                    flash(
                        self.renderer,
                        "Credentials cleared. You'll be prompted on next run.",
                        seconds=1.5,
                        sleep=self._sleep,
                    )
            else:
                return
