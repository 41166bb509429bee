"""
Application-wide constants for ssdl.

Paths, Spotify endpoints and download defaults live here so that
every module agrees on them.
"""

from pathlib import Path


APP_NAME = "ssdl"

# User-level storage (config and debug logs)
CONFIG_DIR = Path.home() / ".ssdl"
CONFIG_FILE = CONFIG_DIR / "config.json"
LOG_DIR = CONFIG_DIR / "logs"

DEFAULT_DOWNLOAD_DIR = Path.home() / "Music" / "ssdl"

# Spotify Web API
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_DASHBOARD_URL = "https://developer.spotify.com/dashboard"

# Seconds subtracted from the token lifetime so that a token is
# refreshed before Spotify starts rejecting it.
TOKEN_EXPIRY_MARGIN = 60

# Search
SEARCH_RESULT_LIMIT = 10
DURATION_TOLERANCE_SECONDS = 10

# Audio
AUDIO_FORMATS = ("mp3", "m4a")
AUDIO_QUALITIES = ("best", "320", "256", "192", "128")

# External executables that must be on PATH
REQUIRED_EXECUTABLES = ("yt-dlp", "ffmpeg")
