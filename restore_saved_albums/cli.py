"""
Command-line interface for restore-saved-albums.

This module implements the CLI using Click; rich-click is used for the
help and error colors.

Usage:
    restore-saved-albums --client-id <id> --client-secret <secret>
    restore-saved-albums -i <id> -s <secret>

    Both credentials are required. SPOTIPY_CLIENT_ID and SPOTIPY_CLIENT_SECRET
    may be set in the environment instead of passing the flags.

What a run does:
    1. Opens the browser for Spotify login (token cached by spotipy)
    2. Reads all Liked Songs
    3. Backs them up to a new private playlist "srsa backup <timestamp>"
    4. Unsaves all saved albums
    5. Saves the albums of the Liked Songs, oldest first
    6. Unsaves tracks that Spotify saved as a side effect

Exit Codes:
    0   Success
    1   Invalid arguments or unexpected error
    2   Spotify authentication failed
    3   Spotify API error (run aborted, see backup playlist)
    4   Other error
    130 Interrupted by user
"""

import sys

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.MAX_WIDTH = 100

from restore_saved_albums import __version__
from restore_saved_albums.core import (
    AuthenticationError,
    ConfigError,
    RestoreAlbumsError,
    RichProgressObserver,
    SpotifyError,
    build_config,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from restore_saved_albums.spotify import SpotifyClient
from restore_saved_albums.sync import RunSummary, restore_saved_albums

logger = get_logger(__name__)


@click.command()
@click.option(
    "-i", "--client-id",
    type=str,
    envvar="SPOTIPY_CLIENT_ID",
    show_envvar=True,
    metavar="<client-id>",
    help="Spotify application client ID (required, or set SPOTIPY_CLIENT_ID)"
)
@click.option(
    "-s", "--client-secret",
    type=str,
    envvar="SPOTIPY_CLIENT_SECRET",
    show_envvar=True,
    metavar="<client-secret>",
    help="Spotify application client secret (required, or set SPOTIPY_CLIENT_SECRET)"
)
@click.version_option(__version__, prog_name="restore-saved-albums")
def cli(client_id: str | None, client_secret: str | None) -> None:
    """
    Restore saved albums for all saved tracks.

    Rebuilds your saved albums so they contain exactly the albums of your
    Liked Songs, saved in the order the songs were liked. A backup playlist
    of all Liked Songs is created first.
    """
    setup_logging()

    try:
        config = build_config(client_id, client_secret)

        logger.info("Authenticating with Spotify")
        client = SpotifyClient.from_credentials(config.spotify)

        with RichProgressObserver() as progress:
            summary = restore_saved_albums(client, config.sync, progress)

        _print_summary(summary)

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except AuthenticationError as e:
        click.echo(f"Authentication failed: {e.message}", err=True)
        click.echo("Check your client id and client secret", err=True)
        logger.debug("Authentication error", exc_info=True)
        sys.exit(2)

    except SpotifyError as e:
        click.echo(f"Spotify error: {e.message}", err=True)
        click.echo(
            "Saved albums may be incomplete. Your Liked Songs are in the backup playlist.",
            err=True
        )
        logger.debug(f"Spotify error details: {e.details}", exc_info=True)
        sys.exit(3)

    except RestoreAlbumsError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.debug("Error", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


def _print_summary(summary: RunSummary) -> None:
    """Log the final statistics of a completed run."""
    result = summary.reconcile
    spillover = result.spillover_removed + len(summary.final_spillover)

    logger.info("=" * 60)
    logger.info("SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Backup playlist:   {summary.backup.name}")
    if summary.backup.url:
        logger.info(f"Backup URL:        {summary.backup.url}")
    logger.info(f"Saved tracks:      {summary.tracks}")
    logger.info(f"Albums unsaved:    {result.albums_removed}")
    logger.info(f"Albums saved:      {len(result.albums_added)}")
    logger.info(f"Overflow retries:  {result.overflow_recoveries}")
    logger.info(f"Spilled tracks:    {spillover}")
    logger.info("=" * 60)


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `restore-saved-albums` from the
    command line.
    """
    cli()


if __name__ == "__main__":
    main()
