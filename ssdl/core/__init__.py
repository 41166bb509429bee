"""
Core module for ssdl.

This module provides the foundational components used throughout the application:
    - constants: Paths, endpoints and defaults
    - exceptions: Custom exception classes for error handling
    - config: JSON configuration store
    - logger: Logging setup (file output in debug mode only)
    - deps: Check for required system executables

Usage:
    from ssdl.core import (
        Config, ConfigStore,
        setup_logging, get_logger,
        SsdlError, ConfigError, AuthError
    )
"""

from ssdl.core.config import Config, ConfigStore, apply_environment
from ssdl.core.exceptions import (
    AuthError,
    ConfigError,
    DependencyError,
    DownloadError,
    FetchError,
    ResolveError,
    SetupCancelled,
    SsdlError,
    TagError,
    TransferError,
)
from ssdl.core.logger import get_logger, setup_logging, shutdown_logging

__all__ = [
    # Config
    "Config",
    "ConfigStore",
    "apply_environment",
    # Exceptions
    "SsdlError",
    "ConfigError",
    "AuthError",
    "FetchError",
    "ResolveError",
    "TransferError",
    "TagError",
    "DownloadError",
    "DependencyError",
    "SetupCancelled",
    # Logger
    "setup_logging",
    "get_logger",
    "shutdown_logging",
]
