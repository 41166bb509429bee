"""
Song search: query entry, Spotify search and a results menu.

The results menu shows a details panel for the highlighted track and is
windowed like every other list so it fits small terminals.
"""

from typing import Sequence

from ssdl.core.constants import SEARCH_RESULT_LIMIT
from ssdl.core.exceptions import FetchError
from ssdl.core.logger import get_logger
from ssdl.screens.common import RULE, heading, key_help, show_message, show_status
from ssdl.spotify.client import SpotifyClient
from ssdl.spotify.models import Track
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.prompts import MENU_CANCELLED, menu_select, text_input
from ssdl.tui.renderer import Renderer, visible_window, window_indicator
from ssdl.tui.style import bright_cyan, bright_white, cyan, dim
from ssdl.utils import format_duration, truncate

logger = get_logger(__name__)

# Rows used by everything except the result list itself
SEARCH_CHROME_ROWS = 14


def query_frame(text: str) -> str:
    lines = ["", heading("Search for a song"), ""]
    lines.append(cyan("  > ") + text + dim("|"))
    lines.append("")
    lines.append(dim("  Type a song name, artist, or both"))
    lines.append("")
    lines.append(key_help("Enter search | Esc back"))
    return "\n".join(lines)


def results_frame(query: str, tracks: Sequence[Track], selected: int, capacity: int) -> str:
    """
    Frame for the results menu.

    Args:
        query: The query the results belong to.
        tracks: Search results.
        selected: Highlighted result.
        capacity: Maximum number of result rows to show.
    """
    lines = ["", heading(f'Results for "{query}"'), ""]

    start, end = visible_window(len(tracks), selected, capacity)
    for index in range(start, end):
        track = tracks[index]
        title = f"{truncate(track.title, 30):<30}"
        artist = f"{truncate(track.artist, 20):<20}"
        duration = format_duration(track.duration_ms)
        if index == selected:
            lines.append(bright_cyan("  > ") + bright_white(title) + "  " + cyan(artist) + "  " + dim(duration))
        else:
            lines.append("    " + dim(title) + "  " + dim(artist) + "  " + dim(duration))

    indicator = window_indicator(start, end, len(tracks))
    if indicator:
        lines.append(indicator)

    if tracks:
        track = tracks[selected]
        lines.append("")
        lines.append(RULE)
        lines.append(dim("  Title:    ") + track.title)
        lines.append(dim("  Artist:   ") + track.artist)
        lines.append(dim("  Album:    ") + track.album)
        lines.append(dim("  Duration: ") + format_duration(track.duration_ms))
        lines.append(RULE)

    lines.append("")
    lines.append(key_help("↑/↓ navigate | Enter select | Esc back"))
    return "\n".join(lines)


def show_search(keys: KeyDispatcher, renderer: Renderer, client: SpotifyClient) -> Track | None:
    """
    Run the search flow.

    Returns:
        The chosen track, or None if the user backed out, nothing was
        found or the search failed (the latter two after a message screen).
    """
    query = text_input(keys, lambda text: renderer.render(query_frame(text)))
    if query is None or not query.strip():
        return None
    query = query.strip()

    show_status(renderer, "Searching Spotify...")
    try:
        tracks = client.search_tracks(query, limit=SEARCH_RESULT_LIMIT)
    except FetchError as e:
        logger.warning(f"Search failed for {query!r}: {e.message}")
        show_message(keys, renderer, f"Search failed: {e.message}")
        return None

    if not tracks:
        show_message(keys, renderer, f'No results for "{query}"', tone="warning")
        return None

    capacity = max(3, renderer.rows - SEARCH_CHROME_ROWS)
    index = menu_select(
        keys,
        tracks,
        lambda items, selected: renderer.render(results_frame(query, items, selected, capacity)),
    )
    if index == MENU_CANCELLED:
        return None
    return tracks[index]
