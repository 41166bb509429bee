"""
URL entry screen with live validation.
"""

from ssdl.screens.common import SUPPORTED_URL_LINES, heading, key_help
from ssdl.spotify.client import parse_spotify_url
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.prompts import text_input
from ssdl.tui.renderer import Renderer
from ssdl.tui.style import dim, green, red

CURSOR = "|"


def url_frame(text: str) -> str:
    """Frame for the URL prompt, with feedback on what has been typed so far."""
    lines = ["", heading("Paste a Spotify URL"), ""]
    entered = text.strip()

    if not entered:
        lines.append(dim("  > ") + dim(CURSOR))
        lines.append("")
        lines.append(dim("  Supported:"))
        lines.extend(dim(f"    {line}") for line in SUPPORTED_URL_LINES)
    else:
        link = parse_spotify_url(entered)
        if link is not None:
            lines.append(green("  > ") + text + dim(CURSOR))
            lines.append("")
            lines.append(green(f"  Valid {link.kind.value} URL"))
        else:
            lines.append(red("  > ") + text + dim(CURSOR))
            lines.append("")
            lines.append(red("  Invalid Spotify URL"))

    lines.append("")
    lines.append(key_help("Enter continue | Esc back"))
    return "\n".join(lines)


def show_url_input(keys: KeyDispatcher, renderer: Renderer) -> str | None:
    """
    Ask for a Spotify URL.

    Returns:
        The trimmed URL, or None if cancelled or left empty.
    """
    url = text_input(keys, lambda text: renderer.render(url_frame(text)))
    if url is None or not url.strip():
        return None
    return url.strip()
