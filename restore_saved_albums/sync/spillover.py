"""
Spillover detection and cleanup.

Saving an album while the library is near its size limit can implicitly
save tracks of that album. Those "spillover" tracks were never in the
user's Liked Songs. They are found by comparing a fresh read of saved
tracks against the snapshot taken at the start of the run, then unsaved.

Guarantees:
    - A track id present in the original snapshot is never deleted.
    - Exactly the ids in (current - original) are deleted.
    - Tracks without an id are ignored on both sides: they cannot be
      targeted, so they are never reported as spillover.
"""

from typing import Iterable, Protocol, Sequence

from restore_saved_albums.core.config import SyncConfig
from restore_saved_albums.core.logger import get_logger
from restore_saved_albums.core.progress import NULL_PROGRESS, ProgressObserver, Stage
from restore_saved_albums.spotify.models import CollectionKind, Page, Track
from restore_saved_albums.sync.reader import read_saved_tracks
from restore_saved_albums.utils import chunked, unique_in_order

logger = get_logger(__name__)


class LibraryEditor(Protocol):
    """The part of the client contract the resolver needs."""

    def list_page(self, kind: CollectionKind, page_size: int, offset: int) -> Page:
        ...

    def remove_from_library(self, kind: CollectionKind, ids: list[str]) -> None:
        ...


def find_spillover(original: Iterable[Track], current: Iterable[Track]) -> list[str]:
    """
    Compute the ids saved now that were not saved originally.

    Args:
        original: Track snapshot taken before any library change.
        current: Track snapshot read now.

    Returns:
        Spillover track ids in `current` order, without repeats.
    """
    original_ids = {track.id for track in original if track.id is not None}

    return unique_in_order(
        track.id
        for track in current
        if track.id is not None and track.id not in original_ids
    )


class SpilloverResolver:
    """
    Removes tracks that were saved as a side effect of saving albums.

    Example:
        resolver = SpilloverResolver(client, config.sync, progress)
        removed = resolver.resolve(original_tracks)
    """

    def __init__(
        self,
        client: LibraryEditor,
        config: SyncConfig,
        progress: ProgressObserver = NULL_PROGRESS
    ) -> None:
        self._client = client
        self._config = config
        self._progress = progress

    def resolve(self, original_tracks: Sequence[Track]) -> list[str]:
        """
        Re-read saved tracks and unsave the spillover.

        Args:
            original_tracks: Snapshot taken at the start of the run.

        Returns:
            The ids that were unsaved (empty if there was no spillover).

        Raises:
            TransientUpstreamError: If reading or unsaving fails.
        """
        current_tracks = read_saved_tracks(self._client, self._config, self._progress)
        spilled_ids = find_spillover(original_tracks, current_tracks)

        if not spilled_ids:
            logger.info("No spilled tracks found")
            return []

        logger.info(f"Unsaving {len(spilled_ids)} spilled tracks")

        for start, batch in chunked(spilled_ids, self._config.spillover_delete_batch_size):
            self._client.remove_from_library(CollectionKind.TRACKS, list(batch))
            logger.debug(f"Unsaved spilled tracks {start + 1}-{start + len(batch)}")
            self._progress.on_progress(
                Stage.DELETE_SPILLOVER, start + len(batch), len(spilled_ids)
            )

        return spilled_ids
