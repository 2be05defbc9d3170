"""
Paginated collection reader.

Drains an entire library collection (Liked Songs or saved albums) into an
ordered, immutable snapshot.

Pagination:
    Starts at offset 0 and requests pages of config.page_size items. The
    offset advances by the number of items actually returned, not by the
    requested page size, so a short page never causes items to be skipped.
    Reading stops when Spotify reports no next page. An empty page also
    ends the read, otherwise a collection shrinking while it is read could
    loop forever.

Ordering:
    Pages of saved tracks are not guaranteed to be sorted relative to each
    other, so the track snapshot is sorted by added_at (oldest first). The
    sort is stable: tracks saved in the same second keep the order Spotify
    returned them in. Tracks without a timestamp sort last.

Failure:
    Any page error propagates immediately; a partial snapshot is never
    returned.
"""

from typing import Any, Protocol

from restore_saved_albums.core.config import SyncConfig
from restore_saved_albums.core.logger import get_logger
from restore_saved_albums.core.progress import NULL_PROGRESS, ProgressObserver, Stage
from restore_saved_albums.spotify.models import Album, CollectionKind, Page, Track

logger = get_logger(__name__)

READ_STAGES = {
    CollectionKind.TRACKS: Stage.READ_TRACKS,
    CollectionKind.ALBUMS: Stage.READ_ALBUMS,
}

# Sorts after any real ISO-8601 timestamp
MISSING_TIMESTAMP = "9999-99-99T99:99:99Z"


class PageSource(Protocol):
    """The part of the client contract the reader needs."""

    def list_page(self, kind: CollectionKind, page_size: int, offset: int) -> Page:
        ...


def read_collection(
    client: PageSource,
    kind: CollectionKind,
    config: SyncConfig,
    progress: ProgressObserver = NULL_PROGRESS
) -> tuple[Any, ...]:
    """
    Read every item of a library collection.

    Args:
        client: Object providing list_page().
        kind: Which collection to read.
        config: Supplies page_size.
        progress: Receives (stage, items read so far, reported total).

    Returns:
        Tuple of Track or Album objects. Tracks are sorted by added_at;
        albums keep the order Spotify returned them in.

    Raises:
        TransientUpstreamError: If any page cannot be read.
    """
    stage = READ_STAGES[kind]
    items: list[Any] = []
    offset = 0

    while True:
        page = client.list_page(kind, config.page_size, offset)
        items.extend(page.items)
        offset += len(page.items)

        logger.debug(f"Read {len(page.items)} saved {kind.value} at offset {offset - len(page.items)}")
        progress.on_progress(stage, len(items), page.total)

        if not page.has_next or not page.items:
            break

    if kind is CollectionKind.TRACKS:
        items.sort(key=lambda track: track.added_at or MISSING_TIMESTAMP)

    logger.info(f"Read {len(items)} saved {kind.value}")
    return tuple(items)


def read_saved_tracks(
    client: PageSource,
    config: SyncConfig,
    progress: ProgressObserver = NULL_PROGRESS
) -> tuple[Track, ...]:
    """Read all saved tracks, oldest first."""
    return read_collection(client, CollectionKind.TRACKS, config, progress)


def read_saved_albums(
    client: PageSource,
    config: SyncConfig,
    progress: ProgressObserver = NULL_PROGRESS
) -> tuple[Album, ...]:
    """Read all saved albums in the order Spotify lists them."""
    return read_collection(client, CollectionKind.ALBUMS, config, progress)
