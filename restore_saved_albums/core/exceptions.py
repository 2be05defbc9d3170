"""
Exception classes for restore-saved-albums.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, and the upstream errors are split by kind so callers can tell an
overflow apart from any other failure without inspecting message text.

Exception Hierarchy:
    RestoreAlbumsError (base)
        ConfigError - Invalid credentials or tuning values
        MissingIdError - Entity without an id under the "error" policy
        SpotifyError - Spotify API issues (base for upstream failures)
            AuthenticationError - Token acquisition / 401 / 403
            TransientUpstreamError - Any other read or write failure
            LibraryOverflowError - Album save rejected (library size limit)
"""


class RestoreAlbumsError(Exception):
    """
    Base exception for all restore-saved-albums errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every tool error with a single except clause.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (ids, offsets).

    Example:
        try:
            restore_saved_albums(client, config)
        except RestoreAlbumsError as e:
            logger.error(f"Run failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary containing additional context.
                     Common keys include:
                     - 'offset': Collection offset of the failed request
                     - 'ids': Spotify ids involved in the failed request
                     - 'original_error': The wrapped exception as a string
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(RestoreAlbumsError):
    """
    Raised when credentials or tuning values are invalid.

    This is a CRITICAL error raised before any Spotify call is made.

    Common causes:
        - Empty client id or client secret
        - Non-positive batch or page size
        - Batch size above the upstream maximum for that endpoint

    Example:
        raise ConfigError(
            "'album_delete_batch_size' must be between 1 and 50",
            details={'field': 'album_delete_batch_size', 'value': 80}
        )
    """
    pass


class MissingIdError(RestoreAlbumsError):
    """
    Raised when an entity without a Spotify id is met under MissingIdPolicy.ERROR.

    Local files in Liked Songs have no track id and sometimes no album id.
    By default such entities are skipped; this error only appears when the
    caller asked for strict handling.
    """
    pass


class SpotifyError(RestoreAlbumsError):
    """
    Base class for failures reported by the Spotify API.

    Attributes:
        http_status: HTTP status code of the failed request, if known.

    Example:
        raise TransientUpstreamError(
            "Failed to read saved tracks page",
            details={'offset': 150},
            http_status=502
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        http_status: int | None = None
    ) -> None:
        """
        Initialize the Spotify error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            http_status: HTTP status of the failed request, if any.
        """
        super().__init__(message, details)
        self.http_status = http_status


class AuthenticationError(SpotifyError):
    """
    Raised when the OAuth session cannot be obtained or is rejected.

    This is a CRITICAL error. It is raised before any collection is
    touched when token acquisition fails, and later if Spotify answers
    401/403 (expired token, missing scope).
    """
    pass


class TransientUpstreamError(SpotifyError):
    """
    Raised for any page read or batch write failure other than overflow.

    Despite the name this error is NOT retried: it propagates immediately
    and terminates the run. The name documents that the failure is usually
    an upstream hiccup (502, timeout) rather than a logic error, so simply
    re-running the tool is the expected remedy.
    """
    pass


class LibraryOverflowError(SpotifyError):
    """
    Raised when saving an album fails.

    The only failure observed for album saves is the account hitting the
    total saved-items limit (about 10,000). Saving an album can implicitly
    save related tracks, which pushes the library over that limit. The
    reconciler reacts by removing the spillover tracks and retrying the
    failed save exactly once; a second failure propagates.
    """
    pass
