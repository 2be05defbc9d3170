"""
restore-saved-albums: Rebuild Spotify saved albums from Liked Songs.

Saves every album that has at least one track in the user's Liked Songs,
in the order the songs were liked, after unsaving all existing albums.

Architecture:
    core/       - Configuration, exceptions, logging, progress reporting
    spotify/    - Spotify API client (spotipy) and data models
    sync/       - Synchronization engine:
                    reader     paginated collection reads
                    backup     order-preserving backup playlist
                    albums     album derivation
                    reconciler album unsave/save with overflow recovery
                    spillover  detection and cleanup of spilled tracks
                    pipeline   the full run
    utils/      - Small sequence helpers
    cli.py      - Command-line interface

Usage:
    Command Line:
        restore-saved-albums --client-id <id> --client-secret <secret>

    Python API:
        from restore_saved_albums.core import build_config
        from restore_saved_albums.spotify import SpotifyClient
        from restore_saved_albums.sync import restore_saved_albums

        config = build_config(client_id, client_secret)
        client = SpotifyClient.from_credentials(config.spotify)
        summary = restore_saved_albums(client, config.sync)

Dependencies:
    - spotipy: Spotify API client
    - requests: Transport errors raised through spotipy
    - click / rich-click: CLI framework and colors
    - rich: Progress bars
    - tqdm: Log output that does not break progress bars
"""

__version__ = "0.1.0"
__author__ = "restore-saved-albums"
__license__ = "MIT"
