"""
Live progress view for a download run.

DownloadingView.update is passed to DownloadPipeline.run as the update
callback and redraws the whole frame after every status change.
"""

import time
from typing import Callable, Sequence

from ssdl.download.pipeline import TrackState, TrackStatus
from ssdl.screens.common import RULE, heading, key_help
from ssdl.spotify.models import Track
from ssdl.tui.renderer import Renderer, progress_bar, visible_window, window_indicator
from ssdl.tui.style import bright_white, cyan, dim, green, red, yellow
from ssdl.utils import format_bytes, format_elapsed, truncate

MIN_VISIBLE_ROWS = 8
DOWNLOADING_CHROME_ROWS = 10
TITLE_WIDTH = 32


def downloading_capacity(total: int, rows: int) -> int:
    return min(total, max(MIN_VISIBLE_ROWS, rows - DOWNLOADING_CHROME_ROWS))


def active_index(statuses: Sequence[TrackStatus]) -> int:
    """
    Index the progress list is centered on.

    The first track that is being worked on, otherwise the number of
    finished tracks (the next one to start, or the end of the list).
    """
    for index, status in enumerate(statuses):
        if status.state.is_active:
            return index
    return sum(1 for status in statuses if status.state.is_finished)


def track_row(track: Track, status: TrackStatus) -> str:
    title = f"{truncate(track.display_name, TITLE_WIDTH):<{TITLE_WIDTH}}"

    if status.state is TrackState.QUEUED:
        return dim(f"  ·  {title}  waiting")
    if status.state is TrackState.SEARCHING:
        return yellow("  ~  ") + title + dim("  finding match...")
    if status.state is TrackState.DOWNLOADING:
        return cyan("  >  ") + bright_white(title) + "  " + progress_bar(status.percent, 12) + dim(f" {status.message}")
    if status.state is TrackState.METADATA:
        return cyan("  >  ") + bright_white(title) + dim("  tagging...")
    if status.state is TrackState.DONE:
        return green("  +  ") + title + dim(f"  {format_bytes(status.file_size)}")
    return red("  x  ") + title + red(f"  {truncate(status.message, 40)}")


def downloading_frame(
    tracks: Sequence[Track],
    statuses: Sequence[TrackStatus],
    elapsed: float,
    rows: int
) -> str:
    """
    Frame for the progress view.

    Args:
        tracks: Tracks of the run, in order.
        statuses: Their current statuses.
        elapsed: Seconds since the run started.
        rows: Terminal height.
    """
    total = len(tracks)
    done = sum(1 for status in statuses if status.state is TrackState.DONE)
    errors = sum(1 for status in statuses if status.state is TrackState.ERROR)
    overall = (done + errors) / total * 100 if total else 100.0

    lines = ["", heading(f"Downloading {done + errors}/{total}"), ""]
    lines.append("  " + progress_bar(overall, 30))
    lines.append("")

    start, end = visible_window(total, active_index(statuses), downloading_capacity(total, rows))
    for index in range(start, end):
        lines.append(track_row(tracks[index], statuses[index]))

    indicator = window_indicator(start, end, total)
    if indicator:
        lines.append(indicator)

    lines.append("")
    lines.append(RULE)
    footer = f"Elapsed {format_elapsed(elapsed)}"
    if errors:
        footer += f" | {errors} failed"
    lines.append(key_help(footer + " | Ctrl+C quit"))
    return "\n".join(lines)


class DownloadingView:
    """
    Redraws the progress frame for one pipeline run.

    Attributes:
        tracks: Tracks being downloaded.
        started_at: Clock value when the view was created.
    """

    def __init__(
        self,
        renderer: Renderer,
        tracks: Sequence[Track],
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._renderer = renderer
        self._clock = clock
        self.tracks = list(tracks)
        self.started_at = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self.started_at

    def update(self, statuses: Sequence[TrackStatus]) -> None:
        self._renderer.render(
            downloading_frame(self.tracks, statuses, self.elapsed, self._renderer.rows)
        )
