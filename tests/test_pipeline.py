"""Test the full restore run against an in-memory library"""

import pytest

from restore_saved_albums.core.exceptions import LibraryOverflowError, TransientUpstreamError
from restore_saved_albums.spotify.models import Album
from restore_saved_albums.sync import restore_saved_albums


@pytest.fixture
def liked_songs(make_track):
    """Ten liked songs spread over four albums"""
    albums = ["A1", "A2", "A1", "A3", "A2", "A4", "A4", "A1", "A3", "A2"]
    return [make_track(i, album_id=album) for i, album in enumerate(albums)]


class TestRestoreSavedAlbums:
    """Test restore_saved_albums end to end"""

    def test_round_trip(self, make_library, liked_songs, small_config):
        """Backup equals the liked songs and albums equal their albums"""
        library = make_library(
            tracks=liked_songs,
            albums=[Album(id="X1"), Album(id="A3"), Album(id="X2")]
        )

        summary = restore_saved_albums(library, small_config)

        assert library.playlists[summary.backup.id] == [t.id for t in liked_songs]
        assert library.saved_album_order == ["A1", "A2", "A3", "A4"]
        assert set(library.saved_album_ids()) == {"A1", "A2", "A3", "A4"}
        assert library.saved_track_ids() == {t.id for t in liked_songs}
        assert summary.tracks == 10
        assert summary.reconcile.albums_removed == 3
        assert summary.final_spillover == []

    def test_backup_written_before_albums_change(self, make_library, liked_songs, small_config):
        """A failure while saving albums leaves a complete backup"""
        library = make_library(tracks=liked_songs, always_fail={"A2"})

        with pytest.raises(LibraryOverflowError):
            restore_saved_albums(library, small_config)

        handle = library.created[0][0]
        assert library.playlists[handle.id] == [t.id for t in liked_songs]

    def test_read_failure_changes_nothing(self, make_library, liked_songs, sync_config):
        """No playlist is created and no album touched if reading fails"""
        library = make_library(tracks=liked_songs, albums=[Album(id="X1")])
        library.fail_on["list_page"] = TransientUpstreamError("Failed to read saved tracks")

        with pytest.raises(TransientUpstreamError):
            restore_saved_albums(library, sync_config)

        assert library.created == []
        assert library.album_deletes == []

    def test_overflow_recovery(self, make_library, make_track, liked_songs, small_config):
        """Spillover from a failed save is removed and the run completes"""
        spilled = [make_track(100, album_id="A3"), make_track(101, album_id="A3")]
        library = make_library(tracks=liked_songs, overflow_on={"A3": spilled})

        summary = restore_saved_albums(library, small_config)

        assert library.saved_track_ids() == {t.id for t in liked_songs}
        assert library.saved_album_order == ["A1", "A2", "A3", "A4"]
        assert summary.reconcile.overflow_recoveries == 1
        assert summary.reconcile.spillover_removed == 2

    def test_final_cleanup_removes_silent_spillover(self, make_library, make_track, liked_songs, small_config):
        """Tracks saved by a successful album save are removed at the end"""
        extra = make_track(200, album_id="A4")
        library = make_library(tracks=liked_songs, side_effect_tracks={"A4": [extra]})

        summary = restore_saved_albums(library, small_config)

        assert summary.final_spillover == ["t200"]
        assert library.saved_track_ids() == {t.id for t in liked_songs}

    def test_idempotent(self, make_library, liked_songs, small_config):
        """A second run leaves the same albums in the same order"""
        library = make_library(tracks=liked_songs, albums=[Album(id="X1")])

        restore_saved_albums(library, small_config)
        first_albums = library.saved_album_ids()
        library.saved_album_order = []

        restore_saved_albums(library, small_config)

        assert library.saved_album_ids() == first_albums
        assert library.saved_album_order == ["A1", "A2", "A3", "A4"]
        assert library.saved_track_ids() == {t.id for t in liked_songs}
        assert len(library.playlists) == 2
