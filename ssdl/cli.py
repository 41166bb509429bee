"""
Command-line interface for ssdl.

This module implements the entry point using Click (rich-click is used
for the help output). Everything after the startup checks happens in the
full-screen TUI driven by ssdl.app.App.

Usage:
    ssdl                                            Open the main menu
    ssdl "https://open.spotify.com/track/..."       Start with a URL
    ssdl --config ./config.json --debug             Custom config, debug logs

Startup sequence:
    1. --version / --help are answered without any other checks
    2. yt-dlp and ffmpeg must be on PATH (install help otherwise)
    3. stdin and stdout must be a terminal
    4. Logging, config and the blessed terminal session are set up
    5. The App runs until the user exits

Exit codes:
    0: Normal exit, help, version, Ctrl+C or "quit" on the summary
    1: Missing dependency, no terminal, cancelled setup,
       authentication failure or any other fatal error
"""

import os
import sys
from pathlib import Path

import rich_click as click
from blessed import Terminal
from dotenv import load_dotenv
from rich.console import Console

from ssdl import __version__
from ssdl.app import App
from ssdl.core.config import ConfigStore
from ssdl.core.constants import APP_NAME, CONFIG_FILE, LOG_DIR, SPOTIFY_DASHBOARD_URL
from ssdl.core.deps import check_dependencies, print_install_instructions
from ssdl.core.exceptions import AuthError, DependencyError, SetupCancelled, SsdlError
from ssdl.core.logger import get_logger, setup_logging, shutdown_logging
from ssdl.tui.input import KeyDispatcher
from ssdl.tui.renderer import Renderer

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("url", required=False, default=None, metavar="[URL]")
@click.option(
    "-v", "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.json>",
    help=f"Config file to use (default: {CONFIG_FILE})"
)
@click.option(
    "--debug",
    is_flag=True,
    help=f"Write debug logs to {LOG_DIR}"
)
def cli(url: str | None, version: bool, config_path: Path | None, debug: bool) -> None:
    """
    ssdl: Spotify song downloader for the terminal.

    Fetches track, album and playlist info from Spotify, finds each song
    on YouTube Music and saves it as a tagged audio file.

    \b
    EXAMPLES:
        ssdl                                           # Interactive menu
        ssdl "https://open.spotify.com/track/..."      # Download a track
        ssdl "https://open.spotify.com/playlist/..."   # Pick playlist tracks
        ssdl "https://open.spotify.com/album/..."      # Pick album tracks

    \b
    REQUIREMENTS:
        yt-dlp and ffmpeg on PATH, and a Spotify app (Client ID + Secret)
        from the Spotify developer dashboard.
    """
    if version:
        click.echo(f"{APP_NAME} v{__version__}")
        sys.exit(EXIT_OK)

    try:
        check_dependencies()
    except DependencyError as e:
        print_install_instructions(e.missing)
        sys.exit(EXIT_FAILURE)

    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        click.echo(click.style("✗ ssdl must be run in an interactive terminal.", fg="red"), err=True)
        sys.exit(EXIT_FAILURE)

    debug = debug or bool(os.environ.get("DEBUG"))
    setup_logging(LOG_DIR, debug=debug)
    logger.info(f"{APP_NAME} v{__version__} starting")

    try:
        exit_code = _run_session(url, config_path or CONFIG_FILE, debug)
    finally:
        shutdown_logging()
    sys.exit(exit_code)


def _run_session(url: str | None, config_path: Path, debug: bool) -> int:
    """
    Run the TUI and translate its outcome into an exit code.

    The terminal is restored (KeyDispatcher context exit) before any
    message is printed here.

    Args:
        url: Optional Spotify URL to start with.
        config_path: Location of config.json.
        debug: Print tracebacks of fatal errors.

    Returns:
        Process exit code.
    """
    load_dotenv()
    store = ConfigStore(config_path)
    config = store.load()

    terminal = Terminal()
    renderer = Renderer(terminal)
    exit_code = EXIT_OK

    try:
        with KeyDispatcher(terminal) as keys:
            App(keys, renderer, store, config).run(url)

    except SetupCancelled as e:
        click.echo(click.style(e.message, fg="yellow"), err=True)
        exit_code = EXIT_FAILURE

    except AuthError as e:
        click.echo(click.style(f"✗ Authentication failed: {e.message}", fg="red"), err=True)
        click.echo(click.style(f"  Check your Client ID and Client Secret at {SPOTIFY_DASHBOARD_URL}", dim=True), err=True)
        click.echo(click.style("  Stored credentials were cleared; you'll be prompted on next run.", dim=True), err=True)
        exit_code = EXIT_FAILURE

    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else EXIT_OK

    except SsdlError as e:
        logger.error(f"Fatal error: {e.message}", exc_info=True)
        _report_fatal(e.message, debug)
        exit_code = EXIT_FAILURE

    except Exception as e:
        logger.exception("Unexpected error")
        _report_fatal(str(e), debug)
        exit_code = EXIT_FAILURE

    click.echo(click.style("Goodbye!", dim=True))
    return exit_code


def _report_fatal(message: str, debug: bool) -> None:
    click.echo(click.style(f"✗ Fatal error: {message}", fg="red"), err=True)
    if debug:
        Console(stderr=True).print_exception()


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `ssdl` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
