"""
Screens of the ssdl terminal UI.

Each module pairs pure frame builders (state -> text) with a show_*
function that drives one of the modal prompts and returns its result.
"""

from ssdl.screens.common import flash, show_message, show_status
from ssdl.screens.complete import CompleteAction, show_complete
from ssdl.screens.credentials import prompt_credentials
from ssdl.screens.downloading import DownloadingView
from ssdl.screens.preview import show_preview
from ssdl.screens.search import show_search
from ssdl.screens.settings import SettingsAction, next_audio_format, show_directory_input, show_settings
from ssdl.screens.track_list import show_track_list
from ssdl.screens.url_input import show_url_input
from ssdl.screens.welcome import MainAction, show_welcome

__all__ = [
    "CompleteAction",
    "DownloadingView",
    "MainAction",
    "SettingsAction",
    "flash",
    "next_audio_format",
    "prompt_credentials",
    "show_complete",
    "show_directory_input",
    "show_message",
    "show_preview",
    "show_search",
    "show_settings",
    "show_status",
    "show_track_list",
    "show_url_input",
    "show_welcome",
]
