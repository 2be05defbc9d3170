"""
Core module for restore-saved-albums.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Credentials and synchronization tuning values
    - logger: Console logging that coexists with progress bars
    - progress: Progress observer interface and Rich implementation

Usage:
    from restore_saved_albums.core import (
        Config, build_config,
        setup_logging, get_logger,
        RestoreAlbumsError, LibraryOverflowError
    )
"""

from restore_saved_albums.core.config import (
    Config,
    MissingIdPolicy,
    SpotifyConfig,
    SyncConfig,
    build_config,
)
from restore_saved_albums.core.exceptions import (
    AuthenticationError,
    ConfigError,
    LibraryOverflowError,
    MissingIdError,
    RestoreAlbumsError,
    SpotifyError,
    TransientUpstreamError,
)
from restore_saved_albums.core.logger import (
    get_logger,
    setup_logging,
    shutdown_logging,
)
from restore_saved_albums.core.progress import (
    NULL_PROGRESS,
    ProgressObserver,
    RichProgressObserver,
    Stage,
)

__all__ = [
    # Config
    "Config",
    "SpotifyConfig",
    "SyncConfig",
    "MissingIdPolicy",
    "build_config",
    # Exceptions
    "RestoreAlbumsError",
    "ConfigError",
    "MissingIdError",
    "SpotifyError",
    "AuthenticationError",
    "TransientUpstreamError",
    "LibraryOverflowError",
    # Logger
    "setup_logging",
    "get_logger",
    "shutdown_logging",
    # Progress
    "Stage",
    "ProgressObserver",
    "NULL_PROGRESS",
    "RichProgressObserver",
]
