"""
Configuration management for ssdl.

This module handles loading and saving the application configuration
stored as JSON in ~/.ssdl/config.json.

The configuration file contains:
    - Spotify API credentials (client id and secret)
    - Output directory for downloaded files
    - Audio format and quality passed to yt-dlp

Semantics:
    - The whole document is read and written at once (no partial updates).
    - Keys missing from the file are filled with defaults on load.
    - A file that cannot be read falls back to the defaults; configuration
      problems never stop the application.

Environment Overrides:
    Credentials and the download directory can be supplied through the
    environment (or a .env file in the working directory). Overrides apply
    to the running session only and are never written back to the file:
        SSDL_SPOTIFY_CLIENT_ID
        SSDL_SPOTIFY_CLIENT_SECRET
        SSDL_DOWNLOAD_DIR

Example config.json:
    {
      "spotify_client_id": "your_client_id_here",
      "spotify_client_secret": "your_client_secret_here",
      "download_dir": "/home/user/Music/ssdl",
      "audio_format": "mp3",
      "audio_quality": "best"
    }
"""

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ssdl.core.constants import (
    AUDIO_FORMATS,
    AUDIO_QUALITIES,
    CONFIG_FILE,
    DEFAULT_DOWNLOAD_DIR,
)
from ssdl.core.exceptions import ConfigError
from ssdl.core.logger import get_logger

logger = get_logger(__name__)


ENV_OVERRIDES = {
    "SSDL_SPOTIFY_CLIENT_ID": "spotify_client_id",
    "SSDL_SPOTIFY_CLIENT_SECRET": "spotify_client_secret",
    "SSDL_DOWNLOAD_DIR": "download_dir",
}


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Treated as immutable: settings changes produce a new Config through
    with_updates() which is then saved as a whole.

    Attributes:
        spotify_client_id: Spotify application client ID ("" if unset).
        spotify_client_secret: Spotify application client secret ("" if unset).
        download_dir: Directory where audio files are written.
        audio_format: Target audio container, one of AUDIO_FORMATS.
        audio_quality: "best" or a bitrate in kbps, one of AUDIO_QUALITIES.
    """
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    download_dir: str = str(DEFAULT_DOWNLOAD_DIR)
    audio_format: str = "mp3"
    audio_quality: str = "best"

    @property
    def has_credentials(self) -> bool:
        """True when both Spotify credentials are set."""
        return bool(self.spotify_client_id and self.spotify_client_secret)

    @property
    def download_path(self) -> Path:
        """The download directory with ~ expanded."""
        return Path(self.download_dir).expanduser()

    def with_updates(self, **changes: Any) -> "Config":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def without_credentials(self) -> "Config":
        """Return a copy with both Spotify credentials cleared."""
        return replace(self, spotify_client_id="", spotify_client_secret="")

    def to_dict(self) -> dict[str, str]:
        """Serialize to the JSON document layout."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Build a Config from a parsed JSON document.

        Unknown keys are ignored and missing keys take their default.
        Values outside the allowed sets for audio format and quality
        are replaced by the defaults.

        Args:
            data: Dictionary parsed from config.json.

        Returns:
            Config with defaults merged under missing keys.
        """
        defaults = cls()
        known = {f.name for f in fields(cls)}
        values = {
            key: str(value)
            for key, value in data.items()
            if key in known and value is not None
        }
        config = replace(defaults, **values)

        if config.audio_format not in AUDIO_FORMATS:
            logger.warning(f"Unknown audio format '{config.audio_format}', using default")
            config = replace(config, audio_format=defaults.audio_format)
        if config.audio_quality not in AUDIO_QUALITIES:
            logger.warning(f"Unknown audio quality '{config.audio_quality}', using default")
            config = replace(config, audio_quality=defaults.audio_quality)

        return config


class ConfigStore:
    """
    JSON file store for the application configuration.

    Attributes:
        path: Location of the config.json document.

    Example:
        store = ConfigStore()
        config = store.load()
        store.save(config.with_updates(download_dir="~/Downloads"))
    """

    def __init__(self, path: Path = CONFIG_FILE) -> None:
        self.path = path

    def load(self) -> Config:
        """
        Load the configuration, creating the file with defaults if missing.

        Returns:
            The stored configuration with defaults merged in, or the
            default configuration if the file cannot be read.
        """
        if not self.path.exists():
            config = Config()
            try:
                self.save(config)
            except ConfigError as e:
                logger.warning(e.message)
            return config

        try:
            return Config.from_dict(self._read())
        except ConfigError as e:
            logger.warning(f"{e.message}; using defaults")
            return Config()

    def save(self, config: Config) -> None:
        """
        Write the whole configuration document.

        Args:
            config: Configuration to persist.

        Raises:
            ConfigError: If the directory or file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2)
                f.write("\n")
        except OSError as e:
            raise ConfigError(
                f"Failed to save config: {e}",
                details={"file_path": str(self.path), "original_error": str(e)}
            ) from e
        logger.debug(f"Config saved to {self.path}")

    def _read(self) -> dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(
                f"Failed to read config: {e}",
                details={"file_path": str(self.path), "original_error": str(e)}
            ) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(
                f"Invalid JSON in config file: {e}",
                details={"file_path": str(self.path), "original_error": str(e)}
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                "Config file must contain a JSON object",
                details={"file_path": str(self.path)}
            )
        return data


def apply_environment(config: Config, load_env_file: bool = True) -> Config:
    """
    Apply environment variable overrides to a configuration.

    Args:
        config: Configuration loaded from the store.
        load_env_file: Also read a .env file from the working directory.
                       Existing environment variables take precedence.

    Returns:
        A copy of config with every non-empty override applied.
        The input is returned unchanged when nothing is set.
    """
    if load_env_file:
        load_dotenv()

    overrides = {
        field_name: os.environ[env_var]
        for env_var, field_name in ENV_OVERRIDES.items()
        if os.environ.get(env_var)
    }
    if not overrides:
        return config

    logger.debug(f"Environment overrides: {sorted(overrides)}")
    return config.with_updates(**overrides)
