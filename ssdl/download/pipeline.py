"""
Sequential download pipeline.

Tracks are processed strictly one at a time, in input order. Each track
moves through a small state machine:

    queued -> searching -> downloading -> metadata -> done
                  |             |
                  +-------------+--> error

    searching    Resolve a source (ResolveError -> error).
    downloading  Run the transfer; percent never decreases
                 (TransferError -> error).
    metadata     Write tags. Best-effort: a TagError is ignored and the
                 track still ends up done.
    done         Measure the file size (0 if it cannot be read).

Every mutation of a TrackStatus is followed by a call to the update
callback so the progress screen can redraw. The run always returns
exactly one DownloadResult per input track, in input order. Only a
problem that makes the whole run pointless (the output directory cannot
be created) raises DownloadError.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol, Sequence

from ssdl.core.exceptions import DownloadError, ResolveError, TagError, TransferError
from ssdl.core.logger import get_logger
from ssdl.spotify.models import Track
from ssdl.utils import ensure_directory, track_basename
from ssdl.youtube.models import MatchConfidence, SourceMatch

logger = get_logger(__name__)


class TrackState(str, Enum):
    """Pipeline state of a single track."""
    QUEUED = "queued"
    SEARCHING = "searching"
    DOWNLOADING = "downloading"
    METADATA = "metadata"
    DONE = "done"
    ERROR = "error"

    @property
    def is_active(self) -> bool:
        return self in (TrackState.SEARCHING, TrackState.DOWNLOADING, TrackState.METADATA)

    @property
    def is_finished(self) -> bool:
        return self in (TrackState.DONE, TrackState.ERROR)


@dataclass
class TrackStatus:
    """
    Live status of one track during a pipeline run.

    Mutated only by the pipeline, read by the progress screen.

    Attributes:
        state: Current TrackState.
        percent: Transfer progress, 0-100, never decreasing.
        message: Short status text ("Downloading...", error message...).
        file_path: Output file once downloaded.
        file_size: Output size in bytes once done.
    """
    state: TrackState = TrackState.QUEUED
    percent: float = 0.0
    message: str = ""
    file_path: Path | None = None
    file_size: int = 0

    def advance(self, percent: float, message: str) -> None:
        """Record progress. Lower percent values keep the current percent."""
        self.percent = max(self.percent, min(100.0, percent))
        self.message = message


@dataclass(frozen=True)
class DownloadResult:
    """
    Final outcome for one track.

    Attributes:
        track: The input track.
        success: True if an audio file was produced.
        file_path: Output file (success only).
        file_size: Output size in bytes (success only).
        error: Failure message (failure only).
        confidence: How the source was chosen, if one was found.
    """
    track: Track
    success: bool
    file_path: Path | None = None
    file_size: int | None = None
    error: str | None = None
    confidence: MatchConfidence | None = None

    @property
    def is_low_confidence(self) -> bool:
        return self.confidence is MatchConfidence.LOW


class SourceResolver(Protocol):
    def resolve(self, title: str, artist: str, duration_ms: int | None) -> SourceMatch: ...


class AudioTransfer(Protocol):
    audio_format: str

    def download(
        self,
        url: str,
        output_dir: Path,
        basename: str,
        on_progress: Callable[[float, str], None] | None = None
    ) -> Path: ...


class MetadataWriter(Protocol):
    def write(self, file_path: Path, track: Track) -> None: ...


UpdateCallback = Callable[[Sequence[TrackStatus]], None]


class DownloadPipeline:
    """
    Runs the search -> download -> tag sequence for a list of tracks.

    Attributes:
        statuses: One TrackStatus per track of the current (or last) run.

    Example:
        pipeline = DownloadPipeline(YouTubeResolver(), YtDlpTransfer(), TagWriter())
        results = pipeline.run(tracks, Path("~/Music/ssdl"), on_update=view.update)
    """

    def __init__(
        self,
        resolver: SourceResolver,
        transfer: AudioTransfer,
        tagger: MetadataWriter
    ) -> None:
        self._resolver = resolver
        self._transfer = transfer
        self._tagger = tagger
        self.statuses: list[TrackStatus] = []
        self._on_update: UpdateCallback | None = None

    def run(
        self,
        tracks: Sequence[Track],
        output_dir: Path,
        on_update: UpdateCallback | None = None
    ) -> list[DownloadResult]:
        """
        Download every track, one at a time.

        Args:
            tracks: Tracks to download, in order.
            output_dir: Directory for the audio files (created if needed).
            on_update: Called with all statuses after every status change.

        Returns:
            One DownloadResult per track, in input order.

        Raises:
            DownloadError: If the output directory cannot be created.
        """
        try:
            ensure_directory(output_dir)
        except OSError as e:
            raise DownloadError(
                f"Cannot create output directory {output_dir}: {e}",
                details={"output_dir": str(output_dir), "original_error": str(e)}
            ) from e

        self.statuses = [TrackStatus() for _ in tracks]
        self._on_update = on_update
        self._notify()

        results = []
        for track, status in zip(tracks, self.statuses):
            results.append(self._process(track, status, output_dir))

        succeeded = sum(1 for r in results if r.success)
        logger.info(f"Download run finished: {succeeded}/{len(results)} succeeded")
        return results

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update(self.statuses)

    def _fail(self, track: Track, status: TrackStatus, message: str, match: SourceMatch | None = None) -> DownloadResult:
        status.state = TrackState.ERROR
        status.message = message
        self._notify()
        logger.warning(f"Failed: {track.display_name}: {message}")
        return DownloadResult(
            track=track,
            success=False,
            error=message,
            confidence=match.confidence if match else None,
        )

    def _process(self, track: Track, status: TrackStatus, output_dir: Path) -> DownloadResult:
        # Searching
        status.state = TrackState.SEARCHING
        status.message = "Searching..."
        self._notify()
        try:
            match = self._resolver.resolve(track.title, track.artist, track.duration_ms)
        except ResolveError as e:
            return self._fail(track, status, e.message)
        except Exception as e:
            logger.exception(f"Unexpected resolver error for {track.display_name}")
            return self._fail(track, status, f"Search failed: {e}")

        # Downloading
        status.state = TrackState.DOWNLOADING
        status.message = "Downloading..."
        self._notify()

        def on_progress(percent: float, message: str) -> None:
            status.advance(percent, message)
            self._notify()

        try:
            file_path = self._transfer.download(
                match.url, output_dir, track_basename(track.title, track.artist), on_progress
            )
        except TransferError as e:
            return self._fail(track, status, e.message, match)
        except Exception as e:
            logger.exception(f"Unexpected transfer error for {track.display_name}")
            return self._fail(track, status, f"Download failed: {e}", match)

        status.file_path = file_path

        # Metadata (best-effort)
        status.state = TrackState.METADATA
        status.message = "Writing tags..."
        self._notify()
        try:
            self._tagger.write(file_path, track)
        except TagError as e:
            logger.debug(f"Tagging skipped for {track.display_name}: {e.message}")
        except Exception as e:
            logger.debug(f"Tagging skipped for {track.display_name}: {e}", exc_info=True)

        # Done
        try:
            file_size = file_path.stat().st_size
        except OSError:
            file_size = 0

        status.state = TrackState.DONE
        status.percent = 100.0
        status.message = "Done"
        status.file_size = file_size
        self._notify()

        return DownloadResult(
            track=track,
            success=True,
            file_path=file_path,
            file_size=file_size,
            confidence=match.confidence,
        )
