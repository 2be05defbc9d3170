"""
Configuration management for restore-saved-albums.

This module holds the credentials passed on the command line and the
tuning values used by the synchronization engine. There is no config
file: everything is built in memory by build_config() at startup.

Batch Sizes:
    The defaults below are known-good values found against the live API,
    not officially specified limits. The documentation claims 50 ids per
    library delete, yet 50 ids results in 502 responses; 20 works. Bulk
    album saves do not respect id order, so albums are saved one at a time.

Usage:
    from restore_saved_albums.core.config import build_config

    config = build_config(client_id, client_secret)
    print(config.sync.page_size)  # 50

    # Override a value (tests, experiments)
    config = build_config(client_id, client_secret, album_delete_batch_size=10)
"""

from dataclasses import dataclass, field, fields
from enum import Enum

from restore_saved_albums.core.exceptions import ConfigError


DEFAULT_REDIRECT_URI = "http://127.0.0.1:8888/callback"

# Scopes needed to read/modify the library and create the backup playlist
DEFAULT_SCOPE = "user-library-read user-library-modify playlist-modify-private"

DEFAULT_BACKUP_PREFIX = "srsa backup"
DEFAULT_BACKUP_DESCRIPTION = (
    "Backup of ALL saved songs created by spotify-restore-saved-albums"
)

# Upstream maxima per request (Spotify Web API)
MAX_PAGE_SIZE = 50
MAX_PLAYLIST_ADD = 100
MAX_LIBRARY_IDS = 50


class MissingIdPolicy(str, Enum):
    """
    What to do with tracks or albums that have no Spotify id.

    Local files saved to Liked Songs have no track id and can never be
    referenced by id-based calls.

    Values:
        IGNORE: Skip silently (historical behaviour, default).
        WARN: Skip and log a warning with the entity name.
        ERROR: Raise MissingIdError and abort the run.
    """
    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class SpotifyConfig:
    """
    Spotify application credentials and OAuth settings.

    Attributes:
        client_id: The Spotify application client ID.
        client_secret: The Spotify application client secret.
        redirect_uri: Redirect URI registered for the application.
        scope: Space separated OAuth scopes requested at login.
    """
    client_id: str
    client_secret: str
    redirect_uri: str = DEFAULT_REDIRECT_URI
    scope: str = DEFAULT_SCOPE


@dataclass(frozen=True)
class SyncConfig:
    """
    Tuning values for the synchronization engine.

    Attributes:
        page_size: Items requested per page when reading a collection.
        backup_batch_size: Track ids appended to the backup playlist per call.
        album_delete_batch_size: Album ids unsaved per call.
        album_add_batch_size: Album ids saved per call. Anything above 1
                              loses the save order.
        spillover_delete_batch_size: Track ids unsaved per call during cleanup.
        backup_name_prefix: Backup playlist name, followed by a UTC timestamp.
        backup_description: Description of the backup playlist.
        missing_id_policy: Handling of entities without a Spotify id.

    Raises:
        ConfigError: From __post_init__ if a size is not a positive integer
                     or exceeds the upstream maximum for its endpoint.
    """
    page_size: int = 50
    backup_batch_size: int = 50
    album_delete_batch_size: int = 20
    album_add_batch_size: int = 1
    spillover_delete_batch_size: int = 50
    backup_name_prefix: str = DEFAULT_BACKUP_PREFIX
    backup_description: str = DEFAULT_BACKUP_DESCRIPTION
    missing_id_policy: MissingIdPolicy = MissingIdPolicy.IGNORE

    def __post_init__(self) -> None:
        limits = {
            "page_size": MAX_PAGE_SIZE,
            "backup_batch_size": MAX_PLAYLIST_ADD,
            "album_delete_batch_size": MAX_LIBRARY_IDS,
            "album_add_batch_size": MAX_LIBRARY_IDS,
            "spillover_delete_batch_size": MAX_LIBRARY_IDS,
        }
        for name, maximum in limits.items():
            value = getattr(self, name)
            # bool is an int subclass, reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= maximum:
                raise ConfigError(
                    f"'{name}' must be an integer between 1 and {maximum}",
                    details={"field": name, "value": value}
                )

        if not self.backup_name_prefix.strip():
            raise ConfigError(
                "'backup_name_prefix' must be a non-empty string",
                details={"field": "backup_name_prefix"}
            )

        if not isinstance(self.missing_id_policy, MissingIdPolicy):
            try:
                policy = MissingIdPolicy(self.missing_id_policy)
            except ValueError as e:
                raise ConfigError(
                    f"Unknown missing id policy: {self.missing_id_policy!r}",
                    details={"field": "missing_id_policy", "value": self.missing_id_policy}
                ) from e
            # Frozen dataclass: normalise through object.__setattr__
            object.__setattr__(self, "missing_id_policy", policy)


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Attributes:
        spotify: Credentials and OAuth settings.
        sync: Synchronization tuning values.
    """
    spotify: SpotifyConfig
    sync: SyncConfig = field(default_factory=SyncConfig)


def build_config(client_id: str, client_secret: str, **sync_overrides) -> Config:
    """
    Validate credentials and build the frozen Config object.

    Args:
        client_id: Spotify application client ID (from --client-id).
        client_secret: Spotify application client secret (from --client-secret).
        **sync_overrides: Optional SyncConfig field overrides.

    Returns:
        Config: Validated configuration.

    Raises:
        ConfigError: If a credential is empty, an override names an unknown
                     field, or an override value is invalid.

    Example:
        config = build_config("abc", "def", page_size=20)
    """
    spotify_config = _parse_spotify_config(client_id, client_secret)

    known = {f.name for f in fields(SyncConfig)}
    unknown = sorted(set(sync_overrides) - known)
    if unknown:
        raise ConfigError(
            f"Unknown sync setting(s): {', '.join(unknown)}",
            details={"fields": unknown}
        )

    return Config(spotify=spotify_config, sync=SyncConfig(**sync_overrides))


def _parse_spotify_config(client_id: str, client_secret: str) -> SpotifyConfig:
    """
    Validate and strip the Spotify credentials.

    Raises:
        ConfigError: If client_id or client_secret is missing or blank.
    """
    if not isinstance(client_id, str) or not client_id.strip():
        raise ConfigError(
            "'client_id' must be a non-empty string",
            details={"field": "client_id"}
        )

    if not isinstance(client_secret, str) or not client_secret.strip():
        raise ConfigError(
            "'client_secret' must be a non-empty string",
            details={"field": "client_secret"}
        )

    return SpotifyConfig(
        client_id=client_id.strip(),
        client_secret=client_secret.strip()
    )
