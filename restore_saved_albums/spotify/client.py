"""
Spotify API client for restore-saved-albums.

This module wraps the spotipy library behind the small set of collection
operations the synchronization engine needs: read one page of a library
collection, create a playlist, append to it at a given position, and
save/unsave ids in the library.

No Global State:
    SpotifyClient is an ordinary object. It is created once by the CLI
    (see from_credentials) and passed explicitly to every component, so
    tests can hand the engine an in-memory fake with the same methods.

Error Mapping:
    spotipy.SpotifyException and transport errors never leave this module.
    They are translated into the project's exception kinds:
        - HTTP 401/403 -> AuthenticationError
        - album save failure -> LibraryOverflowError
        - anything else -> TransientUpstreamError

Retries:
    spotipy retries failed requests on its own by default. The engine's
    recovery logic depends on seeing the first failure of an album save,
    so the session is built with retries disabled.

Usage:
    from restore_saved_albums.spotify.client import SpotifyClient

    client = SpotifyClient.from_credentials(config.spotify)
    page = client.list_page(CollectionKind.TRACKS, page_size=50, offset=0)
"""

from typing import Any, Callable

import requests
import spotipy
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from restore_saved_albums.core.config import SpotifyConfig
from restore_saved_albums.core.exceptions import (
    AuthenticationError,
    LibraryOverflowError,
    SpotifyError,
    TransientUpstreamError,
)
from restore_saved_albums.core.logger import get_logger
from restore_saved_albums.spotify.models import (
    Album,
    CollectionHandle,
    CollectionKind,
    Page,
    Track,
)

logger = get_logger(__name__)

AUTH_STATUSES = (401, 403)


class SpotifyClient:
    """
    Collection-level Spotify client.

    Attributes:
        _spotify: The underlying spotipy.Spotify instance.
        _user_id: Cached Spotify user ID of the authenticated user.

    Example:
        client = SpotifyClient(spotipy.Spotify(auth_manager=...))
        user_id = client.current_user_id()
    """

    def __init__(self, spotify_instance: spotipy.Spotify) -> None:
        self._spotify = spotify_instance
        self._user_id: str | None = None

    @classmethod
    def from_credentials(cls, spotify_config: SpotifyConfig) -> "SpotifyClient":
        """
        Authenticate the user and build a client.

        Opens the browser for the OAuth consent screen on first use; spotipy
        caches the token for later runs.

        Args:
            spotify_config: Credentials, redirect URI and scopes.

        Returns:
            A SpotifyClient bound to the authenticated user.

        Raises:
            AuthenticationError: If the OAuth flow fails or the resulting
                                 token is rejected by Spotify.

        Behavior:
            1. Build a SpotifyOAuth manager with library and playlist scopes
            2. Create spotipy.Spotify with automatic retries disabled
            3. Call current_user() to verify the session before any work
        """
        try:
            auth_manager = SpotifyOAuth(
                client_id=spotify_config.client_id,
                client_secret=spotify_config.client_secret,
                redirect_uri=spotify_config.redirect_uri,
                scope=spotify_config.scope,
                open_browser=True
            )
            spotify_instance = spotipy.Spotify(
                auth_manager=auth_manager,
                retries=0,
                status_retries=0
            )
            client = cls(spotify_instance)
            client.current_user_id()
        except AuthenticationError:
            raise
        except SpotifyError as e:
            raise AuthenticationError(
                f"Spotify authentication failed: {e.message}",
                details=e.details,
                http_status=e.http_status
            ) from e
        except (spotipy.SpotifyException, SpotifyOauthError) as e:
            raise AuthenticationError(
                f"Spotify authentication failed: {e}",
                details={"original_error": str(e)}
            ) from e
        except Exception as e:
            raise AuthenticationError(
                f"Failed to initialize Spotify client: {e}",
                details={"original_error": str(e)}
            ) from e

        logger.debug(f"Authenticated as {client.current_user_id()}")
        return client

    # =========================================================================
    # User
    # =========================================================================

    def current_user_id(self) -> str:
        """
        Get the Spotify user ID of the authenticated user.

        The value is fetched once and cached.

        Raises:
            AuthenticationError: If the token is invalid.
            TransientUpstreamError: On any other failure.
        """
        if self._user_id is None:
            user = self._request(
                "fetch current user",
                self._spotify.current_user
            )
            if not user or not user.get("id"):
                raise AuthenticationError("Spotify returned no current user")
            self._user_id = user["id"]
        return self._user_id

    # =========================================================================
    # Library Collections
    # =========================================================================

    def list_page(self, kind: CollectionKind, page_size: int, offset: int) -> Page:
        """
        Read one page of a library collection.

        Args:
            kind: TRACKS for Liked Songs, ALBUMS for saved albums.
            page_size: Number of items requested (max 50).
            offset: Index of the first item to return.

        Returns:
            Page with parsed Track or Album items; has_next is False when
            Spotify reports no next page.

        Raises:
            TransientUpstreamError: If the page cannot be read.
        """
        if kind is CollectionKind.TRACKS:
            fetch = self._spotify.current_user_saved_tracks
            parse: Callable[[dict[str, Any]], Any] = Track.from_saved_item
        else:
            fetch = self._spotify.current_user_saved_albums
            parse = Album.from_saved_item

        response = self._request(
            f"read saved {kind.value}",
            fetch,
            limit=page_size,
            offset=offset,
            details={"offset": offset, "limit": page_size}
        )
        if response is None:
            raise TransientUpstreamError(
                f"Empty response while reading saved {kind.value}",
                details={"offset": offset, "limit": page_size}
            )

        # Null items still occupy an offset slot; they parse as id-less entities
        items = tuple(parse(item or {}) for item in response.get("items") or [])
        return Page(
            items=items,
            has_next=response.get("next") is not None,
            total=response.get("total")
        )

    def add_to_library(self, kind: CollectionKind, ids: list[str]) -> None:
        """
        Save ids to a library collection.

        Bulk saves do not keep the order of the supplied ids; callers that
        care about save order pass one id per call.

        Raises:
            LibraryOverflowError: If saving albums fails for any reason other
                                  than authentication. The library size limit
                                  is the only failure seen for this call.
            AuthenticationError: If the token is invalid.
            TransientUpstreamError: If saving tracks fails.
        """
        if kind is CollectionKind.ALBUMS:
            try:
                self._request(
                    "save albums",
                    self._spotify.current_user_saved_albums_add,
                    ids,
                    details={"ids": list(ids)}
                )
            except TransientUpstreamError as e:
                raise LibraryOverflowError(
                    f"Failed to save album(s) {', '.join(ids)}: {e.message}",
                    details=e.details,
                    http_status=e.http_status
                ) from e
        else:
            self._request(
                "save tracks",
                self._spotify.current_user_saved_tracks_add,
                ids,
                details={"ids": list(ids)}
            )

    def remove_from_library(self, kind: CollectionKind, ids: list[str]) -> None:
        """
        Unsave ids from a library collection.

        Raises:
            AuthenticationError: If the token is invalid.
            TransientUpstreamError: On any other failure.
        """
        if kind is CollectionKind.ALBUMS:
            delete = self._spotify.current_user_saved_albums_delete
        else:
            delete = self._spotify.current_user_saved_tracks_delete

        self._request(
            f"unsave {kind.value}",
            delete,
            ids,
            details={"ids": list(ids)}
        )

    # =========================================================================
    # Playlists
    # =========================================================================

    def create_collection(
        self,
        name: str,
        is_public: bool,
        description: str
    ) -> CollectionHandle:
        """
        Create a playlist owned by the current user.

        Args:
            name: Playlist name.
            is_public: Whether the playlist is public.
            description: Playlist description.

        Returns:
            CollectionHandle for the new playlist.

        Raises:
            TransientUpstreamError: If the playlist cannot be created.
        """
        user_id = self.current_user_id()
        playlist = self._request(
            "create playlist",
            self._spotify.user_playlist_create,
            user_id,
            name,
            public=is_public,
            description=description,
            details={"name": name}
        )
        if not playlist or not playlist.get("id"):
            raise TransientUpstreamError(
                f"Spotify returned no playlist for '{name}'",
                details={"name": name}
            )

        return CollectionHandle(
            id=playlist["id"],
            name=playlist.get("name", name),
            owner_id=user_id,
            url=(playlist.get("external_urls") or {}).get("spotify", "")
        )

    def append_batch(
        self,
        handle: CollectionHandle,
        ids: list[str],
        start_offset: int
    ) -> None:
        """
        Insert track ids into a playlist at an explicit position.

        Passing the position keeps the final playlist order equal to the
        order of the batches, independent of how Spotify schedules them.

        Args:
            handle: Target playlist.
            ids: Track ids in the desired order (max 100).
            start_offset: Playlist index where the first id is inserted.

        Raises:
            TransientUpstreamError: If the tracks cannot be added.
        """
        self._request(
            "add tracks to playlist",
            self._spotify.playlist_add_items,
            handle.id,
            ids,
            position=start_offset,
            details={"playlist_id": handle.id, "position": start_offset, "count": len(ids)}
        )

    # =========================================================================
    # Private Helpers
    # =========================================================================

    def _request(
        self,
        action: str,
        func: Callable[..., Any],
        *args: Any,
        details: dict | None = None,
        **kwargs: Any
    ) -> Any:
        """
        Call a spotipy method and translate its failures.

        Args:
            action: Short description of the call for error messages.
            func: Bound spotipy method.
            details: Context attached to a raised error.

        Raises:
            AuthenticationError: For HTTP 401/403.
            TransientUpstreamError: For any other spotipy or transport error.
        """
        details = dict(details or {})
        try:
            return func(*args, **kwargs)
        except spotipy.SpotifyException as e:
            details.update({"http_status": e.http_status, "original_error": str(e)})
            if e.http_status in AUTH_STATUSES:
                raise AuthenticationError(
                    f"Not authorized to {action}: {e.msg}",
                    details=details,
                    http_status=e.http_status
                ) from e
            raise TransientUpstreamError(
                f"Failed to {action}: {e.msg}",
                details=details,
                http_status=e.http_status
            ) from e
        except requests.exceptions.RequestException as e:
            details["original_error"] = str(e)
            raise TransientUpstreamError(
                f"Network error while trying to {action}: {e}",
                details=details
            ) from e
