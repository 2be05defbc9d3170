"""
Full restore run.

Runs the synchronization engine end to end, strictly in sequence:

    1. Read all saved tracks (snapshot, oldest first)
    2. Back them up into a new private playlist
    3. Reconcile saved albums against the snapshot
    4. Re-read saved tracks and unsave any remaining spillover

The snapshot from step 1 is the reference for every later step. Nothing is
persisted locally; the backup playlist is the only recovery point if the
run stops halfway.
"""

from dataclasses import dataclass, field

from restore_saved_albums.core.config import SyncConfig
from restore_saved_albums.core.logger import get_logger
from restore_saved_albums.core.progress import NULL_PROGRESS, ProgressObserver
from restore_saved_albums.spotify.models import CollectionHandle
from restore_saved_albums.sync.backup import OrderedBackupWriter
from restore_saved_albums.sync.reader import read_saved_tracks
from restore_saved_albums.sync.reconciler import LibraryReconciler, ReconcileResult
from restore_saved_albums.sync.spillover import SpilloverResolver

logger = get_logger(__name__)


@dataclass
class RunSummary:
    """
    What a completed run did.

    Attributes:
        backup: Handle of the backup playlist.
        tracks: Number of saved tracks in the snapshot.
        reconcile: Result of the album reconciliation.
        final_spillover: Track ids unsaved by the final cleanup.
    """
    backup: CollectionHandle
    tracks: int
    reconcile: ReconcileResult
    final_spillover: list[str] = field(default_factory=list)


def restore_saved_albums(
    client,
    config: SyncConfig,
    progress: ProgressObserver = NULL_PROGRESS
) -> RunSummary:
    """
    Back up saved tracks and rebuild saved albums from them.

    Args:
        client: SpotifyClient, or any object with the same methods.
        config: Synchronization tuning values.
        progress: Receives progress updates for every stage.

    Returns:
        RunSummary describing the run.

    Raises:
        RestoreAlbumsError: Any unrecovered error aborts the run. The
                            remote library may then be half reconciled;
                            the backup playlist holds the original tracks.
    """
    logger.info("Reading saved tracks")
    saved_tracks = read_saved_tracks(client, config, progress)

    backup = OrderedBackupWriter(client, config, progress).write(saved_tracks)

    resolver = SpilloverResolver(client, config, progress)
    reconciler = LibraryReconciler(client, config, progress, resolver=resolver)
    result = reconciler.reconcile(saved_tracks)

    logger.info("Checking for spilled tracks")
    final_spillover = resolver.resolve(saved_tracks)

    return RunSummary(
        backup=backup,
        tracks=len(saved_tracks),
        reconcile=result,
        final_spillover=final_spillover
    )
