"""
Album derivation.

Computes the albums implied by a track snapshot: every distinct album id,
in order of its first occurrence. The order matters because albums are
later saved one by one in this order, so "recently saved albums" mirrors
the order in which the tracks were saved.
"""

from typing import Iterable

from restore_saved_albums.core.config import MissingIdPolicy
from restore_saved_albums.spotify.models import Track
from restore_saved_albums.sync.ids import report_missing_id


def derive_album_ids(
    tracks: Iterable[Track],
    policy: MissingIdPolicy = MissingIdPolicy.IGNORE
) -> list[str]:
    """
    Derive the ordered, deduplicated album ids for a track snapshot.

    Args:
        tracks: Tracks in canonical (added_at) order.
        policy: Handling of tracks without an album id. The default skips
                them, which keeps the function free of side effects.

    Returns:
        Album ids, each exactly once, in first-occurrence order.

    Raises:
        MissingIdError: Under MissingIdPolicy.ERROR.

    Example:
        derive_album_ids([t1_a1, t2_a2, t3_a1])  # ["a1", "a2"]
    """
    seen: set[str] = set()
    album_ids: list[str] = []

    for track in tracks:
        if track.album_id is None:
            report_missing_id(policy, "album", track.name)
            continue
        if track.album_id in seen:
            continue
        seen.add(track.album_id)
        album_ids.append(track.album_id)

    return album_ids
