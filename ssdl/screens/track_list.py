"""
Track selection for playlists and albums.

Every track starts checked. The table is windowed around the cursor so
long playlists stay usable on small terminals.
"""

from typing import Sequence

from ssdl.screens.common import RULE, heading, key_help
from ssdl.spotify.models import Collection, ResourceKind, Track
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.prompts import checkbox_select
from ssdl.tui.renderer import Renderer, draw_table, visible_window, window_indicator
from ssdl.tui.style import bright_white, dim
from ssdl.utils import format_duration, truncate

MAX_VISIBLE_TRACKS = 15
TRACK_LIST_CHROME_ROWS = 12
TABLE_HEADERS = ("#", "Title", "Artist", "Duration")


def track_list_capacity(rows: int) -> int:
    return min(MAX_VISIBLE_TRACKS, rows - TRACK_LIST_CHROME_ROWS)


def collection_header(collection: Collection) -> list[str]:
    """Title and subtitle lines describing a playlist or album."""
    total_ms = sum(track.duration_ms for track in collection.tracks)
    count = f"{collection.track_count} tracks"

    if collection.kind is ResourceKind.ALBUM:
        parts = [f"by {collection.artist}", count]
        if collection.release_date:
            parts.append(collection.release_date[:4])
        return [heading(f"Album: {collection.name}"), dim("  " + " | ".join(parts))]

    parts = [f"by {collection.owner or 'Unknown'}", count, format_duration(total_ms)]
    return [heading(f"Playlist: {collection.name}"), dim("  " + " | ".join(parts))]


def track_list_frame(
    collection: Collection,
    tracks: Sequence[Track],
    cursor: int,
    checked: set[int],
    capacity: int
) -> str:
    """
    Frame for the checkbox table.

    Args:
        collection: Playlist or album being shown.
        tracks: Its tracks.
        cursor: Highlighted row (index into tracks).
        checked: Indices of selected tracks.
        capacity: Maximum number of table rows.
    """
    lines = [""]
    lines.extend(collection_header(collection))
    lines.append("")

    start, end = visible_window(len(tracks), cursor, capacity)
    rows = [
        (
            str(index + 1),
            truncate(tracks[index].title, 28),
            truncate(tracks[index].artist, 18),
            format_duration(tracks[index].duration_ms),
        )
        for index in range(start, end)
    ]
    visible_checked = {index - start for index in checked if start <= index < end}
    lines.append(draw_table(TABLE_HEADERS, rows, selected=cursor - start, checked=visible_checked))

    indicator = window_indicator(start, end, len(tracks))
    lines.append("")
    lines.append("  " + bright_white(f"{len(checked)}/{len(tracks)} selected") + (indicator or ""))
    lines.append(RULE)
    lines.append(key_help("↑/↓ navigate | Space toggle | A select all | Enter download | Esc back"))
    return "\n".join(lines)


def show_track_list(keys: KeyDispatcher, renderer: Renderer, collection: Collection) -> list[Track] | None:
    """
    Let the user pick which tracks to download.

    Returns:
        The selected tracks in collection order (possibly empty), or None
        if cancelled.
    """
    tracks = list(collection.tracks)
    capacity = track_list_capacity(renderer.rows)

    checked = checkbox_select(
        keys,
        tracks,
        lambda items, cursor, selected: renderer.render(
            track_list_frame(collection, items, cursor, selected, capacity)
        ),
    )
    if checked is None:
        return None
    return [track for index, track in enumerate(tracks) if index in checked]
