"""
Order-preserving backup of saved tracks.

Before anything in the library is touched, every saved track is copied
into a new private playlist. The playlist is the recovery mechanism for
the user if a run is interrupted halfway: it is never rolled back.

Naming:
    "{backup_name_prefix} {UTC timestamp}", e.g.
    "srsa backup 2024-01-15 10:30:00.123456+00:00". The timestamp keeps
    names unique across runs.

Ordering:
    Tracks are appended in batches of config.backup_batch_size. Each batch
    is inserted at an explicit position, the number of ids already
    appended, so the playlist order equals the snapshot order however the
    batches are processed upstream. Tracks without an id never occupy a
    slot in the playlist and do not advance the position.

Failure:
    An append error propagates. The partially filled playlist stays in
    the user's library.
"""

from datetime import datetime, timezone
from typing import Protocol, Sequence

from restore_saved_albums.core.config import SyncConfig
from restore_saved_albums.core.exceptions import RestoreAlbumsError
from restore_saved_albums.core.logger import get_logger
from restore_saved_albums.core.progress import NULL_PROGRESS, ProgressObserver, Stage
from restore_saved_albums.spotify.models import CollectionHandle, Track
from restore_saved_albums.sync.ids import track_ids
from restore_saved_albums.utils import chunked

logger = get_logger(__name__)


class PlaylistWriter(Protocol):
    """The part of the client contract the backup writer needs."""

    def create_collection(self, name: str, is_public: bool, description: str) -> CollectionHandle:
        ...

    def append_batch(self, handle: CollectionHandle, ids: list[str], start_offset: int) -> None:
        ...


def backup_playlist_name(prefix: str, now: datetime | None = None) -> str:
    """Build the backup playlist name for the given (or current) UTC time."""
    now = now or datetime.now(timezone.utc)
    return f"{prefix} {now}"


class OrderedBackupWriter:
    """
    Writes a track snapshot into a new playlist, preserving its order.

    Example:
        writer = OrderedBackupWriter(client, config.sync, progress)
        handle = writer.write(saved_tracks)
        print(handle.name)
    """

    def __init__(
        self,
        client: PlaylistWriter,
        config: SyncConfig,
        progress: ProgressObserver = NULL_PROGRESS
    ) -> None:
        self._client = client
        self._config = config
        self._progress = progress

    def write(self, tracks: Sequence[Track]) -> CollectionHandle:
        """
        Create the backup playlist and fill it with `tracks`.

        Args:
            tracks: Track snapshot in its canonical order.

        Returns:
            Handle of the created playlist.

        Raises:
            TransientUpstreamError: If creating or appending fails.
            MissingIdError: If a track has no id under the ERROR policy.
        """
        name = backup_playlist_name(self._config.backup_name_prefix)
        logger.info(f"Creating backup playlist: {name}")

        handle = self._client.create_collection(
            name,
            False,
            self._config.backup_description
        )

        position = 0
        total = len(tracks)

        for start, batch in chunked(tracks, self._config.backup_batch_size):
            ids = track_ids(batch, self._config.missing_id_policy)

            if ids:
                try:
                    self._client.append_batch(handle, ids, position)
                except RestoreAlbumsError:
                    logger.error(
                        f"Backup playlist '{handle.name}' is incomplete: "
                        f"{position} of {total} tracks written"
                    )
                    raise
                logger.debug(f"Backed up {len(ids)} tracks at position {position}")
                position += len(ids)

            self._progress.on_progress(Stage.BACKUP, start + len(batch), total)

        skipped = total - position
        if skipped:
            logger.info(f"Backup skipped {skipped} tracks without an id")
        logger.info(f"Backed up {position} tracks to '{handle.name}'")

        return handle
