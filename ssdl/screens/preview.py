"""
Single track preview shown before downloading one track.
"""

from ssdl.screens.common import heading, key_help
from ssdl.spotify.models import Track
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.keys import Key
from ssdl.tui.prompts import choose_key
from ssdl.tui.renderer import Renderer, draw_box
from ssdl.tui.style import bright_white, cyan, dim
from ssdl.utils import format_duration, truncate


def preview_frame(track: Track) -> str:
    details = [
        bright_white(truncate(track.title, 39)),
        cyan(truncate(track.artist, 39)),
        dim(truncate(track.album, 39)),
        dim(format_duration(track.duration_ms) + (f" | {track.year}" if track.year else "")),
    ]
    lines = ["", heading("Track found"), "", draw_box(details), ""]
    lines.append(key_help("Enter download | Esc back"))
    return "\n".join(lines)


def show_preview(keys: KeyDispatcher, renderer: Renderer, track: Track) -> bool:
    """Returns True if the user wants to download the track."""
    return choose_key(
        keys,
        {Key.RETURN: True, Key.ESCAPE: False},
        render=lambda: renderer.render(preview_frame(track)),
    )
