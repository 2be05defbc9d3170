"""
Handling of entities without a Spotify id.

Local files in Liked Songs have no track id, and some have no album id.
Such entities cannot be referenced by any id-based call. What happens to
them is decided by the configured MissingIdPolicy.
"""

from typing import Iterable

from restore_saved_albums.core.config import MissingIdPolicy
from restore_saved_albums.core.exceptions import MissingIdError
from restore_saved_albums.core.logger import get_logger
from restore_saved_albums.spotify.models import Track

logger = get_logger(__name__)


def report_missing_id(policy: MissingIdPolicy, what: str, name: str) -> None:
    """
    Apply the missing id policy to one entity.

    Args:
        policy: The configured policy.
        what: Kind of id that is missing, e.g. "track" or "album".
        name: Entity name for the message.

    Raises:
        MissingIdError: Under MissingIdPolicy.ERROR.
    """
    if policy is MissingIdPolicy.ERROR:
        raise MissingIdError(
            f"'{name}' has no {what} id",
            details={"name": name, "missing": what}
        )
    if policy is MissingIdPolicy.WARN:
        logger.warning(f"Skipping '{name}': no {what} id (local file?)")


def track_ids(
    tracks: Iterable[Track],
    policy: MissingIdPolicy = MissingIdPolicy.IGNORE
) -> list[str]:
    """
    Collect track ids in order, applying the policy to tracks without one.

    Raises:
        MissingIdError: Under MissingIdPolicy.ERROR, on the first track
                        without an id.
    """
    ids: list[str] = []

    for track in tracks:
        if track.id is None:
            report_missing_id(policy, "track", track.name)
            continue
        ids.append(track.id)

    return ids
