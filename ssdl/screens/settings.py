"""
Settings menu and the download directory editor.

These screens only collect choices; the flow controller applies them to
the config and saves it.
"""

from enum import Enum
from typing import Sequence

from ssdl.core.config import Config
from ssdl.core.constants import AUDIO_FORMATS
from ssdl.screens.common import heading, key_help
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.prompts import MENU_CANCELLED, menu_select, text_input
from ssdl.tui.renderer import Renderer
from ssdl.tui.style import bright_cyan, bright_white, cyan, dim


class SettingsAction(str, Enum):
    DOWNLOAD_DIR = "download_dir"
    AUDIO_FORMAT = "audio_format"
    RESET_CREDENTIALS = "reset_credentials"
    BACK = "back"


def settings_items(config: Config) -> list[tuple[str, str, SettingsAction]]:
    """Menu rows as (label, current value, action)."""
    credentials = "configured" if config.has_credentials else "not set"
    return [
        ("Download directory", config.download_dir, SettingsAction.DOWNLOAD_DIR),
        ("Audio format", config.audio_format, SettingsAction.AUDIO_FORMAT),
        ("Reset Spotify credentials", credentials, SettingsAction.RESET_CREDENTIALS),
        ("Back", "", SettingsAction.BACK),
    ]


def next_audio_format(current: str) -> str:
    """Cycle through the supported formats: mp3 -> m4a -> mp3."""
    try:
        index = AUDIO_FORMATS.index(current)
    except ValueError:
        return AUDIO_FORMATS[0]
    return AUDIO_FORMATS[(index + 1) % len(AUDIO_FORMATS)]


def settings_frame(items: Sequence[tuple[str, str, SettingsAction]], selected: int) -> str:
    lines = ["", heading("Settings"), ""]
    for index, (label, value, _) in enumerate(items):
        value_text = dim(f"  {value}") if value else ""
        if index == selected:
            lines.append(bright_cyan("  > ") + bright_white(f"{label:<28}") + value_text)
        else:
            lines.append("    " + dim(f"{label:<28}") + value_text)
    lines.append("")
    lines.append(key_help("↑/↓ navigate | Enter select | Esc back"))
    return "\n".join(lines)


def show_settings(keys: KeyDispatcher, renderer: Renderer, config: Config, initial: int = 0) -> SettingsAction:
    """Show the settings menu. Escape counts as Back."""
    items = settings_items(config)
    index = menu_select(
        keys,
        items,
        lambda rows, selected: renderer.render(settings_frame(rows, selected)),
        initial=initial,
    )
    if index == MENU_CANCELLED:
        return SettingsAction.BACK
    return items[index][2]


def directory_frame(text: str, current: str) -> str:
    lines = ["", heading("Download directory"), ""]
    lines.append(dim(f"  Current: {current}"))
    lines.append("")
    lines.append(cyan("  > ") + text + dim("|"))
    lines.append("")
    lines.append(key_help("Enter save | Esc back"))
    return "\n".join(lines)


def show_directory_input(keys: KeyDispatcher, renderer: Renderer, current: str) -> str | None:
    """
    Ask for a new download directory, starting from the current one.

    Returns:
        The trimmed directory, or None if cancelled or left empty.
    """
    value = text_input(
        keys,
        lambda text: renderer.render(directory_frame(text, current)),
        initial=current,
    )
    if value is None or not value.strip():
        return None
    return value.strip()
