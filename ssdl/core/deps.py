"""
System dependency check.

ssdl delegates downloading and transcoding to external programs, so
they must be on PATH before the TUI starts.
"""

import shutil

from rich.console import Console

from ssdl.core.constants import REQUIRED_EXECUTABLES
from ssdl.core.exceptions import DependencyError


INSTALL_INSTRUCTIONS: dict[str, dict[str, str]] = {
    "yt-dlp": {
        "macOS": "brew install yt-dlp",
        "Linux": "pip install yt-dlp  (or: sudo apt install yt-dlp)",
        "Windows": "winget install yt-dlp",
    },
    "ffmpeg": {
        "macOS": "brew install ffmpeg",
        "Linux": "sudo apt install ffmpeg",
        "Windows": "winget install ffmpeg",
    },
}


def find_missing(executables: tuple[str, ...] = REQUIRED_EXECUTABLES) -> list[str]:
    """
    Return the executables that cannot be found on PATH.

    Args:
        executables: Program names to look up.

    Returns:
        Missing program names, in the order given.
    """
    return [name for name in executables if shutil.which(name) is None]


def check_dependencies(executables: tuple[str, ...] = REQUIRED_EXECUTABLES) -> None:
    """
    Verify that every required executable is installed.

    Raises:
        DependencyError: If one or more executables are missing.
    """
    missing = find_missing(executables)
    if missing:
        raise DependencyError(missing)


def print_install_instructions(missing: list[str], console: Console | None = None) -> None:
    """
    Print install instructions for each missing executable.

    Args:
        missing: Names of the missing executables.
        console: Console to print on (stderr console by default).
    """
    console = console or Console(stderr=True)
    console.print("[bold red]✗ Missing required dependencies:[/bold red]\n")

    for name in missing:
        console.print(f"  [bold]{name}[/bold]")
        for platform, command in INSTALL_INSTRUCTIONS.get(name, {}).items():
            console.print(f"    {platform + ':':<9} [cyan]{command}[/cyan]")
        console.print()

    console.print("Install the missing tools and run ssdl again.")
