"""
Data models for Spotify entities.

This module defines immutable dataclasses for the handful of Spotify
objects the synchronization engine needs: saved tracks, saved albums,
one page of a collection, and a handle to a created playlist.

Design Decisions:
    - All dataclasses are frozen (immutable); a snapshot read from Spotify
      is never modified, each read produces fresh objects
    - Only the fields the engine uses are kept; names are carried for log
      messages
    - Ids are Optional: local files saved to Liked Songs have no track id
      and may have no album id

Usage:
    from restore_saved_albums.spotify.models import Track

    track = Track.from_saved_item(item)  # item from current_user_saved_tracks
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CollectionKind(str, Enum):
    """The two library collections the tool reads and writes."""
    TRACKS = "tracks"
    ALBUMS = "albums"


@dataclass(frozen=True)
class Track:
    """
    Immutable representation of a saved track.

    Attributes:
        id: Spotify track ID (22-character base62 string), or None for
            local files which cannot be referenced by id.
            Example: "4cOdK2wGLETKBW3PvgPWqT"

        name: Track title as it appears on Spotify.
              Example: "Bohemian Rhapsody"

        album_id: Spotify ID of the album the track belongs to, or None.
                  Example: "6i6folBtxKV28WX3msQ4FE"

        album_name: Album name, used only in log messages.
                    Example: "A Night at the Opera"

        added_at: ISO timestamp of when the track was saved, assigned by
                  Spotify. Used to order the snapshot.
                  Example: "2024-01-15T10:30:00Z"
    """

    id: str | None
    name: str
    album_id: str | None = None
    album_name: str = ""
    added_at: str | None = None

    @classmethod
    def from_saved_item(cls, item: dict[str, Any]) -> "Track":
        """
        Create a Track from a saved-track item.

        Args:
            item: One element of the 'items' list returned by
                  current_user_saved_tracks, shaped like
                  {"added_at": "...", "track": {...}}.

        Returns:
            Track: A new Track instance.
        """
        track_data = item.get("track") or {}
        album_data = track_data.get("album") or {}

        return cls(
            id=track_data.get("id") or None,
            name=track_data.get("name") or "Unknown Track",
            album_id=album_data.get("id") or None,
            album_name=album_data.get("name") or "",
            added_at=item.get("added_at"),
        )


@dataclass(frozen=True)
class Album:
    """
    Immutable representation of a saved album.

    Attributes:
        id: Spotify album ID.
            Example: "6i6folBtxKV28WX3msQ4FE"
        name: Album name, used only in log messages.
        added_at: ISO timestamp of when the album was saved.
    """

    id: str | None
    name: str = ""
    added_at: str | None = None

    @classmethod
    def from_saved_item(cls, item: dict[str, Any]) -> "Album":
        """
        Create an Album from a saved-album item.

        Args:
            item: One element of the 'items' list returned by
                  current_user_saved_albums, shaped like
                  {"added_at": "...", "album": {...}}.
        """
        album_data = item.get("album") or {}

        return cls(
            id=album_data.get("id") or None,
            name=album_data.get("name") or "",
            added_at=item.get("added_at"),
        )


@dataclass(frozen=True)
class Page:
    """
    One page of a remote collection.

    Attributes:
        items: Parsed entities in the order Spotify returned them.
        has_next: False when this is the last page.
        total: Total size of the collection reported by Spotify, if any.
    """

    items: tuple
    has_next: bool
    total: int | None = None


@dataclass(frozen=True)
class CollectionHandle:
    """
    Reference to a playlist created by the tool.

    Attributes:
        id: Spotify playlist ID.
        name: Playlist name as created.
        owner_id: Spotify user ID of the owner.
        url: Spotify web URL of the playlist, if known.
    """

    id: str
    name: str
    owner_id: str
    url: str = ""
