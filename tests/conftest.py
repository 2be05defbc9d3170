"""Test configuration and fixtures"""

from datetime import datetime, timedelta, timezone

import pytest

from restore_saved_albums.core.config import SyncConfig
from restore_saved_albums.core.exceptions import LibraryOverflowError
from restore_saved_albums.core.progress import ProgressObserver
from restore_saved_albums.spotify.models import (
    Album,
    CollectionHandle,
    CollectionKind,
    Page,
    Track,
)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def timestamp(index):
    """ISO timestamp `index` seconds after BASE_TIME, like Spotify's added_at"""
    return (BASE_TIME + timedelta(seconds=index)).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_track(index, album_id="a1", added_at=None, track_id=None):
    """Saved track t<index> on the given album"""
    return Track(
        id=track_id if track_id is not None else f"t{index}",
        name=f"Track {index}",
        album_id=album_id,
        album_name=f"Album {album_id}" if album_id else "",
        added_at=added_at if added_at is not None else timestamp(index),
    )


class FakeLibrary:
    """
    In-memory stand-in for SpotifyClient.

    Saved tracks and albums are kept newest first, like Spotify lists them.
    Every call is recorded so tests can assert on batch sizes and order.

    Options:
        next_until_empty: Report has_next on every non-empty page, so the
                          reader only stops on an empty page.
        max_page_items: Return at most this many items per page regardless
                        of the requested page size.
        overflow_on: album id -> tracks saved as a side effect. The first
                     save of such an album saves the tracks and fails.
        always_fail: Album ids whose save fails every time.
        side_effect_tracks: album id -> tracks silently saved by a
                            successful save of that album.
        fail_on: method name -> exception raised on the next call.
    """

    def __init__(
        self,
        tracks=(),
        albums=(),
        user_id="user_1",
        next_until_empty=False,
        max_page_items=None,
        overflow_on=None,
        always_fail=(),
        side_effect_tracks=None,
    ):
        self.tracks = sorted(tracks, key=lambda t: t.added_at or "", reverse=True)
        self.albums = list(albums)
        self.user_id = user_id
        self.next_until_empty = next_until_empty
        self.max_page_items = max_page_items
        self.overflow_on = dict(overflow_on or {})
        self.always_fail = set(always_fail)
        self.side_effect_tracks = dict(side_effect_tracks or {})
        self.fail_on = {}

        self.playlists = {}
        self.created = []
        self.page_reads = {CollectionKind.TRACKS: [], CollectionKind.ALBUMS: []}
        self.appends = []
        self.album_adds = []
        self.album_deletes = []
        self.track_deletes = []
        self.saved_album_order = []
        self._overflowed = set()

    # Client contract

    def current_user_id(self):
        return self.user_id

    def list_page(self, kind, page_size, offset):
        self._maybe_fail("list_page")
        self.page_reads[kind].append(offset)

        source = self.tracks if kind is CollectionKind.TRACKS else self.albums
        count = page_size if self.max_page_items is None else min(page_size, self.max_page_items)
        items = tuple(source[offset:offset + count])

        if self.next_until_empty:
            has_next = bool(items)
        else:
            has_next = offset + len(items) < len(source)

        return Page(items=items, has_next=has_next, total=len(source))

    def create_collection(self, name, is_public, description):
        self._maybe_fail("create_collection")
        handle = CollectionHandle(
            id=f"playlist_{len(self.created) + 1}",
            name=name,
            owner_id=self.user_id,
        )
        self.playlists[handle.id] = []
        self.created.append((handle, is_public, description))
        return handle

    def append_batch(self, handle, ids, start_offset):
        self._maybe_fail("append_batch")
        playlist = self.playlists[handle.id]
        if start_offset > len(playlist):
            raise AssertionError(
                f"position {start_offset} is past the end of a {len(playlist)} track playlist"
            )
        playlist[start_offset:start_offset] = ids
        self.appends.append((list(ids), start_offset))

    def add_to_library(self, kind, ids):
        self._maybe_fail("add_to_library")

        if kind is CollectionKind.TRACKS:
            for track_id in ids:
                self.tracks.insert(0, Track(id=track_id, name=track_id))
            return

        self.album_adds.append(list(ids))

        for album_id in ids:
            if album_id in self.always_fail:
                raise LibraryOverflowError(f"Failed to save album(s) {album_id}")
            if album_id in self.overflow_on and album_id not in self._overflowed:
                self._overflowed.add(album_id)
                self._save_tracks(self.overflow_on[album_id])
                raise LibraryOverflowError(f"Failed to save album(s) {album_id}")

        # Bulk saves land in no particular order
        for album_id in reversed(ids) if len(ids) > 1 else ids:
            self.albums.insert(0, Album(id=album_id, name=f"Album {album_id}"))
            self.saved_album_order.append(album_id)
            self._save_tracks(self.side_effect_tracks.get(album_id, ()))

    def remove_from_library(self, kind, ids):
        self._maybe_fail("remove_from_library")
        removed = set(ids)

        if kind is CollectionKind.TRACKS:
            self.track_deletes.append(list(ids))
            self.tracks = [t for t in self.tracks if t.id not in removed]
        else:
            self.album_deletes.append(list(ids))
            self.albums = [a for a in self.albums if a.id not in removed]

    # Test helpers

    def saved_track_ids(self):
        return {t.id for t in self.tracks}

    def saved_album_ids(self):
        return [a.id for a in self.albums]

    def _save_tracks(self, tracks):
        for track in tracks:
            self.tracks.insert(0, track)

    def _maybe_fail(self, method):
        error = self.fail_on.pop(method, None)
        if error is not None:
            raise error


class RecordingProgress(ProgressObserver):
    """Progress observer that keeps every update"""

    def __init__(self):
        self.events = []

    def on_progress(self, stage, completed, total):
        self.events.append((stage, completed, total))

    def for_stage(self, stage):
        return [(completed, total) for s, completed, total in self.events if s is stage]


@pytest.fixture
def make_track():
    """Factory for saved tracks"""
    return build_track


@pytest.fixture
def make_library():
    """Factory for in-memory libraries"""
    return FakeLibrary


@pytest.fixture
def sync_config():
    """Default tuning values"""
    return SyncConfig()


@pytest.fixture
def small_config():
    """Tiny batch sizes so small libraries span several batches"""
    return SyncConfig(
        page_size=2,
        backup_batch_size=2,
        album_delete_batch_size=2,
        album_add_batch_size=1,
        spillover_delete_batch_size=2,
    )


@pytest.fixture
def progress():
    """Progress observer recording every update"""
    return RecordingProgress()


@pytest.fixture
def sample_track_item():
    """Saved-track item as returned by current_user_saved_tracks"""
    return {
        'added_at': '2024-01-15T10:30:00Z',
        'track': {
            'id': 'track_123',
            'name': 'Test Song',
            'artists': [{'id': 'artist_123', 'name': 'Test Artist'}],
            'album': {
                'id': 'album_123',
                'name': 'Test Album',
                'album_type': 'album',
                'total_tracks': 12,
            },
            'duration_ms': 210000,
        }
    }


@pytest.fixture
def sample_album_item():
    """Saved-album item as returned by current_user_saved_albums"""
    return {
        'added_at': '2024-02-01T08:00:00Z',
        'album': {
            'id': 'album_456',
            'name': 'Another Album',
            'album_type': 'album',
            'total_tracks': 9,
        }
    }
