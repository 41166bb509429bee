"""
Exception classes for ssdl.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message that is shown directly
on the current screen, plus an optional details dictionary for logging.

Exception Hierarchy:
    SsdlError (base)
        ConfigError - Config file read/write issues (non-fatal)
        AuthError - Spotify rejected the client credentials
        FetchError - Spotify resource fetch issues (recoverable)
        ResolveError - No audio source found for a track (per-track)
        TransferError - External downloader failed (per-track)
        TagError - Tag writing failed (ignored by the pipeline)
        DownloadError - A whole download run cannot proceed
        DependencyError - Required system executables are missing
        SetupCancelled - First-run credential prompt was cancelled
"""


class SsdlError(Exception):
    """
    Base exception for all ssdl errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every ssdl error with a single except
    clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g. track, URL).

    Example:
        try:
            client.get_playlist(playlist_id)
        except SsdlError as e:
            show_message(keys, renderer, e.message)
            logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'track': "Title - Artist" of the track involved
                     - 'url': URL that caused the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SsdlError):
    """
    Raised when the config file cannot be read or written.

    This is a NON-CRITICAL error. Loading falls back to the default
    configuration; saving failures are shown to the user and the
    application keeps running with the in-memory values.

    Common causes:
        - config.json contains invalid JSON
        - Permission denied on ~/.ssdl
        - Disk full
    """
    pass


class AuthError(SsdlError):
    """
    Raised when Spotify rejects the client credentials.

    This is CRITICAL for the session: the stored credentials are cleared
    so that the next run prompts for new ones, and the process exits.

    Example:
        raise AuthError(
            "Spotify auth failed: invalid_client",
            details={'status_code': 400}
        )
    """
    pass


class FetchError(SsdlError):
    """
    Raised when a Spotify resource cannot be fetched.

    Recoverable: the user sees the message and returns to the previous
    screen. Also used for network failures during authentication, which
    say nothing about the validity of the credentials.

    Attributes:
        status_code: HTTP status returned by Spotify, if any.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class ResolveError(SsdlError):
    """
    Raised when no audio source can be found for a track.

    Per-track: the pipeline marks the track as failed and continues
    with the next one.
    """
    pass


class TransferError(SsdlError):
    """
    Raised when the external downloader fails.

    Per-track: the pipeline marks the track as failed and continues.

    A failure to start the process at all (yt-dlp missing, permission
    denied) is distinguished from a process that ran and exited with a
    non-zero status.

    Attributes:
        exit_code: Process exit status, or None if it never started.
        spawn_failed: True if the process could not be started.

    Example:
        raise TransferError(
            "yt-dlp exited with code 1: ERROR: Video unavailable",
            exit_code=1
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        exit_code: int | None = None,
        spawn_failed: bool = False
    ) -> None:
        """
        Initialize transfer error with process information.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            exit_code: Exit status of the downloader process, if it ran.
            spawn_failed: Set to True if the process could not be spawned.
        """
        super().__init__(message, details)
        self.exit_code = exit_code
        self.spawn_failed = spawn_failed


class TagError(SsdlError):
    """
    Raised when tags cannot be written to a downloaded file.

    Tagging is best-effort: the pipeline catches this error and still
    reports the track as successfully downloaded.
    """
    pass


class DownloadError(SsdlError):
    """
    Raised when a whole download run cannot proceed.

    Individual track failures never raise this; it is reserved for
    conditions that make every track fail, such as an output directory
    that cannot be created.
    """
    pass


class DependencyError(SsdlError):
    """
    Raised when required system executables are not on PATH.

    Attributes:
        missing: Names of the missing executables.
    """

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            f"Missing required dependencies: {', '.join(missing)}",
            details={"missing": missing}
        )
        self.missing = missing


class SetupCancelled(SsdlError):
    """Raised when the user cancels the first-run credential prompt."""

    def __init__(self) -> None:
        super().__init__("Setup cancelled.")
