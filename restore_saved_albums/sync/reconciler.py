"""
Saved-albums reconciliation.

Replaces the whole saved-albums collection with exactly the albums implied
by the saved tracks.

Workflow:
    1. Derive the target album ids from the original track snapshot. Under
       the strict missing id policy this fails before anything is unsaved.
    2. Read all saved albums and dedupe their ids. Spotify sometimes lists
       the same album more than once, not always consecutively.
    3. Unsave them in batches of config.album_delete_batch_size (20). The
       API documents a maximum of 50 ids, yet 50 ids results in 502.
    4. Save them in batches of config.album_add_batch_size (1). Bulk save
       does not respect id order, and the order is what makes "recently
       saved albums" follow the track save history.
    5. If a save fails, the library most likely overflowed (~10,000 items)
       because saving an album also saved some of its tracks. Unsave the
       spillover tracks, then retry that save exactly once. A second
       failure propagates and aborts the run.

Per-save state machine:
    pending -> added
    pending -> overflow-detected -> spillover-cleaned -> retried -> added | failed
"""

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from restore_saved_albums.core.config import SyncConfig
from restore_saved_albums.core.exceptions import LibraryOverflowError
from restore_saved_albums.core.logger import get_logger
from restore_saved_albums.core.progress import NULL_PROGRESS, ProgressObserver, Stage
from restore_saved_albums.spotify.models import Album, CollectionKind, Page, Track
from restore_saved_albums.sync.albums import derive_album_ids
from restore_saved_albums.sync.ids import report_missing_id
from restore_saved_albums.sync.reader import read_saved_albums
from restore_saved_albums.sync.spillover import SpilloverResolver
from restore_saved_albums.utils import chunked, unique_in_order

logger = get_logger(__name__)


class LibraryClient(Protocol):
    """The part of the client contract the reconciler needs."""

    def list_page(self, kind: CollectionKind, page_size: int, offset: int) -> Page:
        ...

    def add_to_library(self, kind: CollectionKind, ids: list[str]) -> None:
        ...

    def remove_from_library(self, kind: CollectionKind, ids: list[str]) -> None:
        ...


@dataclass
class ReconcileResult:
    """
    Outcome of a reconciliation.

    Attributes:
        albums_removed: Distinct album ids unsaved in step 3.
        albums_added: Album ids saved in step 4, in save order.
        overflow_recoveries: Saves that needed a spillover cleanup.
        spillover_removed: Track ids unsaved by those cleanups.
    """
    albums_removed: int = 0
    albums_added: list[str] = field(default_factory=list)
    overflow_recoveries: int = 0
    spillover_removed: int = 0


class LibraryReconciler:
    """
    Rebuilds saved albums from the saved-tracks snapshot.

    Example:
        reconciler = LibraryReconciler(client, config.sync, progress)
        result = reconciler.reconcile(saved_tracks)
        print(f"Saved {len(result.albums_added)} albums")
    """

    def __init__(
        self,
        client: LibraryClient,
        config: SyncConfig,
        progress: ProgressObserver = NULL_PROGRESS,
        resolver: SpilloverResolver | None = None
    ) -> None:
        self._client = client
        self._config = config
        self._progress = progress
        self._resolver = resolver or SpilloverResolver(client, config, progress)

    def reconcile(self, original_tracks: Sequence[Track]) -> ReconcileResult:
        """
        Replace saved albums with the albums of `original_tracks`.

        Args:
            original_tracks: Saved-track snapshot in added_at order, taken
                             before any library change.

        Returns:
            ReconcileResult with counts for the summary.

        Raises:
            LibraryOverflowError: If a save fails again after cleanup.
            TransientUpstreamError: If any read or delete fails.
            MissingIdError: If a track has no album id under the ERROR
                            policy. Raised before any album is unsaved.
        """
        result = ReconcileResult()

        # Derived first so a missing id aborts before the library changes
        target_ids = derive_album_ids(original_tracks, self._config.missing_id_policy)

        saved_albums = read_saved_albums(self._client, self._config, self._progress)
        result.albums_removed = self._delete_albums(saved_albums)

        logger.info(f"Saving {len(target_ids)} albums")

        for start, batch in chunked(target_ids, self._config.album_add_batch_size):
            ids = list(batch)
            spilled = self._save_albums(ids, original_tracks)
            if spilled is not None:
                result.overflow_recoveries += 1
                result.spillover_removed += len(spilled)

            result.albums_added.extend(ids)
            self._progress.on_progress(Stage.ADD_ALBUMS, start + len(ids), len(target_ids))

        logger.info(f"Saved {len(result.albums_added)} albums")
        return result

    def _delete_albums(self, albums: Sequence[Album]) -> int:
        """Unsave every album of the snapshot; returns the distinct count."""
        ids: list[str] = []
        for album in albums:
            if album.id is None:
                report_missing_id(self._config.missing_id_policy, "album", album.name)
                continue
            ids.append(album.id)

        album_ids = unique_in_order(ids)
        if len(album_ids) < len(ids):
            logger.debug(f"Ignored {len(ids) - len(album_ids)} duplicate saved albums")

        logger.info(f"Unsaving {len(album_ids)} albums")

        for start, batch in chunked(album_ids, self._config.album_delete_batch_size):
            self._client.remove_from_library(CollectionKind.ALBUMS, list(batch))
            logger.debug(f"Unsaved albums {start + 1}-{start + len(batch)}")
            self._progress.on_progress(Stage.DELETE_ALBUMS, start + len(batch), len(album_ids))

        return len(album_ids)

    def _save_albums(self, ids: list[str], original_tracks: Sequence[Track]) -> list[str] | None:
        """
        Save one batch, recovering once from a library overflow.

        Returns:
            None if the first attempt succeeded, otherwise the spillover
            track ids removed before the successful retry.

        Raises:
            LibraryOverflowError: If the retry fails too.
        """
        try:
            self._client.add_to_library(CollectionKind.ALBUMS, ids)
            return None
        except LibraryOverflowError as e:
            logger.warning(f"Library overflowed while saving {', '.join(ids)}, cleaning up")
            logger.debug(f"Overflow details: {e.details}")

        spilled = self._resolver.resolve(original_tracks)

        logger.info("Retrying album save after cleanup")
        self._client.add_to_library(CollectionKind.ALBUMS, ids)
        return spilled
