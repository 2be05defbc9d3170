"""
Synchronization engine for restore-saved-albums.

    - reader: Drains a paginated library collection into a snapshot
    - backup: Copies the track snapshot into a new playlist, in order
    - albums: Derives the ordered, deduplicated album ids of a snapshot
    - reconciler: Unsaves all albums and saves the derived ones
    - spillover: Finds and unsaves tracks saved as a side effect
    - pipeline: Runs all of the above in sequence

Usage:
    from restore_saved_albums.sync import restore_saved_albums

    summary = restore_saved_albums(client, config.sync, progress)
"""

from restore_saved_albums.sync.albums import derive_album_ids
from restore_saved_albums.sync.backup import OrderedBackupWriter, backup_playlist_name
from restore_saved_albums.sync.pipeline import RunSummary, restore_saved_albums
from restore_saved_albums.sync.reader import (
    read_collection,
    read_saved_albums,
    read_saved_tracks,
)
from restore_saved_albums.sync.reconciler import LibraryReconciler, ReconcileResult
from restore_saved_albums.sync.spillover import SpilloverResolver, find_spillover

__all__ = [
    "read_collection",
    "read_saved_tracks",
    "read_saved_albums",
    "OrderedBackupWriter",
    "backup_playlist_name",
    "derive_album_ids",
    "LibraryReconciler",
    "ReconcileResult",
    "SpilloverResolver",
    "find_spillover",
    "RunSummary",
    "restore_saved_albums",
]
