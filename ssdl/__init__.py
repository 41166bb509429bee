"""
ssdl - Spotify song downloader for the terminal.

An interactive terminal tool that fetches track, playlist and album
metadata from Spotify, finds a matching audio source on YouTube Music,
downloads it with yt-dlp and tags the resulting file.

Architecture:
    The application is driven by a single event loop:

    Screen flow (app.py)
        Decides which screen is active based on application state.
    Screens (screens/)
        Build full-screen text frames and run one modal prompt each.
    Modal prompts (tui/prompts.py)
        Menu, checkbox and text entry built on the key dispatcher.
    Key dispatcher (tui/input.py)
        Turns keystrokes into logical key events.
    Download pipeline (download/pipeline.py)
        Sequential search -> download -> tag state machine per track.

Usage:
    ssdl                                           # Interactive menu
    ssdl "https://open.spotify.com/track/..."      # Download a URL directly
"""

__version__ = "1.0.0"
__author__ = "ssdl contributors"
