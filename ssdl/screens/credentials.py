"""
First-run prompt for the Spotify application credentials.
"""

from ssdl.core.constants import SPOTIFY_DASHBOARD_URL
from ssdl.core.exceptions import SetupCancelled
from ssdl.screens.common import heading, key_help
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.prompts import text_input
from ssdl.tui.renderer import Renderer
from ssdl.tui.style import cyan, dim, green

SECRET_MASK = "*"


def credentials_frame(text: str, client_id: str | None = None) -> str:
    """
    Frame for one step of the credential prompt.

    Args:
        text: Live buffer of the field being edited.
        client_id: Already entered client ID. When given, the frame asks
                   for the secret and masks the buffer.
    """
    lines = ["", heading("Spotify setup"), ""]
    lines.append(dim("  ssdl needs a Spotify application to read track info."))
    lines.append(dim(f"  Create one at {SPOTIFY_DASHBOARD_URL}"))
    lines.append(dim("  and copy its Client ID and Client Secret here."))
    lines.append("")

    if client_id is None:
        lines.append("  Client ID:")
        lines.append(cyan("  > ") + text + dim("|"))
    else:
        lines.append(green("  Client ID: ") + dim(client_id[:8] + "..."))
        lines.append("")
        lines.append("  Client Secret:")
        lines.append(cyan("  > ") + SECRET_MASK * len(text) + dim("|"))

    lines.append("")
    lines.append(key_help("Enter continue | Esc cancel"))
    return "\n".join(lines)


def prompt_credentials(keys: KeyDispatcher, renderer: Renderer) -> tuple[str, str]:
    """
    Ask for the client ID, then the client secret.

    Returns:
        (client_id, client_secret), both trimmed and non-empty.

    Raises:
        SetupCancelled: If either step is cancelled or left empty.
    """
    client_id = text_input(keys, lambda text: renderer.render(credentials_frame(text)))
    if client_id is None or not client_id.strip():
        raise SetupCancelled()
    client_id = client_id.strip()

    client_secret = text_input(keys, lambda text: renderer.render(credentials_frame(text, client_id)))
    if client_secret is None or not client_secret.strip():
        raise SetupCancelled()

    return client_id, client_secret.strip()
