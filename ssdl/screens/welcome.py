"""
Welcome screen with the main menu.
"""

from enum import Enum
from typing import Sequence

from ssdl import __version__
from ssdl.screens.common import key_help
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.prompts import MENU_CANCELLED, menu_select
from ssdl.tui.renderer import Renderer
from ssdl.tui.style import bright_cyan, bright_white, color256, dim

BANNER = (
    "  ███████╗███████╗██████╗ ██╗     ",
    "  ██╔════╝██╔════╝██╔══██╗██║     ",
    "  ███████╗███████╗██║  ██║██║     ",
    "  ╚════██║╚════██║██║  ██║██║     ",
    "  ███████║███████║██████╔╝███████╗",
    "  ╚══════╝╚══════╝╚═════╝ ╚══════╝",
)

# 256-color palette: teal -> cyan -> teal -> green-teal
BANNER_COLORS = (43, 44, 45, 44, 43, 42)


class MainAction(str, Enum):
    URL = "url"
    SEARCH = "search"
    SETTINGS = "settings"
    EXIT = "exit"


MENU_ITEMS: tuple[tuple[str, MainAction], ...] = (
    ("Download from URL", MainAction.URL),
    ("Search for a song", MainAction.SEARCH),
    ("Settings", MainAction.SETTINGS),
    ("Exit", MainAction.EXIT),
)


def welcome_frame(labels: Sequence[str], selected: int) -> str:
    lines = [""]
    lines.extend(color256(line, code) for line, code in zip(BANNER, BANNER_COLORS))
    lines.append(dim("  Spotify Song Downloader") + dim(f"{' ' * 10}v{__version__}"))
    lines.append(dim("  " + "─" * 36))
    lines.append("")

    for index, label in enumerate(labels):
        if index == selected:
            lines.append(bright_cyan("  > ") + bright_white(label))
        else:
            lines.append("    " + dim(label))

    lines.append("")
    lines.append(key_help("↑/↓ navigate | Enter select | Ctrl+C quit"))
    return "\n".join(lines)


def show_welcome(keys: KeyDispatcher, renderer: Renderer) -> MainAction:
    """Show the main menu. Escape counts as Exit."""
    labels = [label for label, _ in MENU_ITEMS]
    index = menu_select(
        keys,
        labels,
        lambda items, selected: renderer.render(welcome_frame(items, selected)),
    )
    if index == MENU_CANCELLED:
        return MainAction.EXIT
    return MENU_ITEMS[index][1]
