"""
Spotify integration module for restore-saved-albums.

This module provides everything that talks to the Spotify Web API:
    - SpotifyClient: Collection-level client built on spotipy
    - Track, Album, Page, CollectionHandle, CollectionKind: Data models

Usage:
    from restore_saved_albums.spotify import SpotifyClient, CollectionKind

    client = SpotifyClient.from_credentials(config.spotify)
    page = client.list_page(CollectionKind.ALBUMS, page_size=50, offset=0)
"""

from restore_saved_albums.spotify.client import SpotifyClient
from restore_saved_albums.spotify.models import (
    Album,
    CollectionHandle,
    CollectionKind,
    Page,
    Track,
)

__all__ = [
    # Client
    "SpotifyClient",
    # Models
    "Track",
    "Album",
    "Page",
    "CollectionHandle",
    "CollectionKind",
]
