"""Command-line interface for playsync."""

import argparse
import sys
from typing import List, Optional

from . import config
from .api import YouTubeAPI
from .auth import Authenticator
from .commands import ConfigCommand, SyncCommand
from .errors import PlaysyncError, SyncAborted
from .logging_config import configure_logging, get_logger
from .models import Configuration
from .store import ConfigStore

logger = get_logger(__name__)


def build_client(configuration: Configuration, quota_policy: Optional[str] = None) -> YouTubeAPI:
    """Authenticate and build the playlist client.

    Raises:
        AuthError: If authentication fails
    """
    authenticator = Authenticator(configuration.oauth2_json, config.TOKEN_FILE)
    return YouTubeAPI(authenticator.build_service(), quota_policy=quota_policy)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="playsync", description="Keep YouTube playlists in sync with their sources"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage playlist configuration")
    config_parser.add_argument(
        "-o", "--oauth2-json", metavar="PATH", help="Path to the OAuth2 client JSON file"
    )
    config_parser.add_argument(
        "-a", "--add", "--add-playlist", dest="add", metavar="PLAYLIST_ID",
        help="Add a target playlist",
    )
    config_parser.add_argument(
        "-f", "--from", dest="sources", action="append", default=[], metavar="PLAYLIST_ID",
        help="Source playlist for --add (repeatable)",
    )
    config_parser.add_argument(
        "-r", "--remove", "--remove-playlist", dest="remove", metavar="PLAYLIST_ID",
        help="Remove a playlist",
    )
    config_parser.add_argument(
        "-l", "--list", "--list-playlists", dest="list", action="store_true",
        help="List all playlists",
    )
    config_parser.add_argument("--reset", action="store_true", help="Reset the configuration")
    config_parser.add_argument(
        "-y", "--yes", action="store_true", help="Do not ask for confirmation on --reset"
    )
    config_parser.add_argument(
        "--quota-policy", choices=config.QUOTA_POLICIES,
        help="What to do when the API quota is exhausted",
    )

    # Sync command
    sync_parser = subparsers.add_parser("sync", help="Sync playlists based on configuration")
    sync_parser.add_argument(
        "-i", "--id", dest="playlist_id", metavar="PLAYLIST_ID",
        help="Playlist ID to sync (syncs all if not specified)",
    )
    sync_parser.add_argument(
        "-d", "--dry-run", action="store_true", help="Show what would be added without changes"
    )
    sync_parser.add_argument(
        "--on-quota", dest="quota_policy", choices=config.QUOTA_POLICIES,
        help="Override the configured quota policy",
    )

    return parser


def main(argv: Optional[List[str]] = None, store: Optional[ConfigStore] = None) -> int:
    """Main entry point.

    Args:
        argv: Command line arguments, defaults to sys.argv[1:]
        store: Configuration store, defaults to the per-user configuration file

    Returns:
        int: Exit code
    """
    parser = create_parser()
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        parser.print_help()
        return 1
    try:
        args = parser.parse_args(args=argv)
    except SystemExit as e:
        return 1 if e.code == 2 else e.code

    configure_logging(debug=args.debug)
    store = store or ConfigStore(config.CONFIG_FILE)

    if args.command == "config":
        command = ConfigCommand(
            store,
            client_factory=build_client,
            oauth2_json=args.oauth2_json,
            add=args.add,
            sources=args.sources,
            remove=args.remove,
            list_playlists=args.list,
            reset=args.reset,
            quota_policy=args.quota_policy,
            assume_yes=args.yes,
        )
    elif args.command == "sync":
        command = SyncCommand(
            store,
            client_factory=build_client,
            playlist_id=args.playlist_id,
            dry_run=args.dry_run,
            quota_policy=args.quota_policy,
            show_progress=sys.stderr.isatty(),
        )
    else:
        parser.print_help()
        return 1

    try:
        if not command.run():
            logger.error("Command failed to run successfully")
            return 1
        return 0
    except SyncAborted as e:
        logger.error("%s", str(e))
        return 1
    except PlaysyncError as e:
        logger.error("Command failed: %s", str(e))
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
