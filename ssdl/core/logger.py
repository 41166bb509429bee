"""
Logging configuration for ssdl.

The terminal belongs to the TUI while ssdl runs, so log records are never
written to the console. Two modes are supported:

    - Normal: the root logger only carries a NullHandler. Recoverable
      errors are shown on screen and logged nowhere.
    - Debug (--debug or DEBUG env var): everything is written to files
      in the log directory:
        - ssdl_full.log: Complete log of all events (DEBUG and above)
        - ssdl_errors.log: Only ERROR and CRITICAL level messages

Log File Locations:
    ~/.ssdl/logs/ by default. Files are overwritten on each run (no rotation).

Usage:
    from ssdl.core.logger import setup_logging, get_logger

    setup_logging(LOG_DIR, debug=True)  # Call once at startup
    logger = get_logger(__name__)       # Get logger for each module

    logger.info("Starting download")
"""

import logging
from pathlib import Path


LOG_FULL_FILENAME = "ssdl_full.log"
LOG_ERRORS_FILENAME = "ssdl_errors.log"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are far too chatty at DEBUG level
NOISY_LOGGERS = ("urllib3", "spotipy", "ytmusicapi", "PIL")


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level messages.

    Used for the ssdl_errors.log file handler.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Check if the record should be logged.

        Args:
            record: The log record to check.

        Returns:
            True if record level is ERROR or higher, False otherwise.
        """
        return record.levelno >= logging.ERROR


# Module-level tracking of created handlers for cleanup
_handlers: list[logging.Handler] = []


def setup_logging(log_dir: Path, debug: bool = False) -> None:
    """
    Initialize the logging system.

    This function should be called once at application startup, before
    the TUI takes over the terminal. Calling it again replaces the
    handlers installed by the previous call.

    Args:
        log_dir: Directory where debug log files are written.
                 Created if it does not exist (debug mode only).
        debug: Write DEBUG-level logs to files when True. When False no
               log output is produced at all.

    Behavior:
        1. Remove handlers installed by a previous call
        2. Debug mode: add the full-log and error-log file handlers
        3. Normal mode: add a NullHandler so that logging's last-resort
           stderr handler never writes over the TUI
        4. Raise noisy third-party loggers to WARNING

    Raises:
        OSError: If the log directory cannot be created (debug mode only).
    """
    shutdown_logging()

    root_logger = logging.getLogger()

    if debug:
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.setLevel(logging.DEBUG)

        file_formatter = logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT)

        full_handler = logging.FileHandler(
            log_dir / LOG_FULL_FILENAME, mode="w", encoding="utf-8"
        )
        full_handler.setLevel(logging.DEBUG)
        full_handler.setFormatter(file_formatter)

        errors_handler = logging.FileHandler(
            log_dir / LOG_ERRORS_FILENAME, mode="w", encoding="utf-8"
        )
        errors_handler.setLevel(logging.ERROR)
        errors_handler.setFormatter(file_formatter)
        errors_handler.addFilter(ErrorOnlyFilter())

        handlers: list[logging.Handler] = [full_handler, errors_handler]
    else:
        root_logger.setLevel(logging.WARNING)
        handlers = [logging.NullHandler()]

    for handler in handlers:
        root_logger.addHandler(handler)
        _handlers.append(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        A configured Logger instance.
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """
    Cleanly shut down the logging system.

    Flushes and closes every handler installed by setup_logging() and
    removes it from the root logger. Safe to call multiple times.
    """
    root_logger = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        root_logger.removeHandler(handler)
        handler.flush()
        handler.close()
