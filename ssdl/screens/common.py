"""
Pieces shared by several screens: headings, rules, status and message frames.
"""

import time
from typing import Callable, Sequence

from ssdl.tui.input import KeyDispatcher
from ssdl.tui.keys import Key
from ssdl.tui.prompts import choose_key
from ssdl.tui.renderer import Renderer
from ssdl.tui.style import CHECK, CROSS, bright_cyan, cyan, dim, green, red, yellow

RULE = dim("  " + "─" * 53)

SUPPORTED_URL_LINES = (
    "open.spotify.com/track/...",
    "open.spotify.com/album/...",
    "open.spotify.com/playlist/...",
)


def heading(text: str) -> str:
    return bright_cyan(f"  {text}")


def key_help(text: str) -> str:
    return dim(f"  {text}")


def status_frame(text: str) -> str:
    """Frame for a short blocking operation, e.g. "Searching Spotify..."."""
    return "\n" + cyan(f"  {text}")


def show_status(renderer: Renderer, text: str) -> None:
    renderer.render(status_frame(text))


def message_frame(title: str, lines: Sequence[str] = (), tone: str = "error") -> str:
    """
    Frame for a message that waits for Enter.

    Args:
        title: First line, colored by tone.
        lines: Extra dimmed lines below the title.
        tone: "error" (red, ✗), "warning" (yellow) or "info" (cyan).
    """
    if tone == "error":
        title_line = red(f"  {CROSS} {title}")
    elif tone == "warning":
        title_line = yellow(f"  {title}")
    else:
        title_line = cyan(f"  {title}")

    parts = ["", title_line, ""]
    parts.extend(dim(f"  {line}") for line in lines)
    if lines:
        parts.append("")
    parts.append(key_help("Press Enter to go back"))
    return "\n".join(parts)


def show_message(
    keys: KeyDispatcher,
    renderer: Renderer,
    title: str,
    lines: Sequence[str] = (),
    tone: str = "error"
) -> None:
    """Show a message until Enter or Escape is pressed."""
    frame = message_frame(title, lines, tone)
    choose_key(
        keys,
        {Key.RETURN: None, Key.ESCAPE: None},
        render=lambda: renderer.render(frame),
    )


def flash(
    renderer: Renderer,
    text: str,
    seconds: float = 1.0,
    sleep: Callable[[float], None] = time.sleep
) -> None:
    """Show a confirmation briefly, e.g. after saving settings."""
    renderer.render("\n" + green(f"  {CHECK}  {text}"))
    sleep(seconds)
