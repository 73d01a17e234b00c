"""Config command: manage the credentials path and sync rules."""

import os
from typing import Callable, List, Optional

from ..config import QUOTA_POLICIES
from ..errors import DuplicateTargetError, ValidationError
from ..logging_config import get_logger
from ..models import Configuration
from ..store import ConfigStore
from .base import ClientFactory, Command

logger = get_logger(__name__)


def ask_confirmation(question: str) -> bool:
    """Ask a yes/no question on the terminal, defaulting to no."""
    try:
        answer = input(f"{question} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


class ConfigCommand(Command):
    """Command for editing the playsync configuration."""

    def __init__(
        self,
        store: ConfigStore,
        client_factory: Optional[ClientFactory] = None,
        oauth2_json: Optional[str] = None,
        add: Optional[str] = None,
        sources: Optional[List[str]] = None,
        remove: Optional[str] = None,
        list_playlists: bool = False,
        reset: bool = False,
        quota_policy: Optional[str] = None,
        assume_yes: bool = False,
        confirm: Callable[[str], bool] = ask_confirmation,
    ) -> None:
        """Initialize command.

        Args:
            store: Configuration store
            client_factory: Builds the playlist client used to look up titles
            oauth2_json: New path to the OAuth2 client JSON
            add: ID of target playlist to add
            sources: IDs of playlists the added playlist syncs from
            remove: ID of target playlist to remove
            list_playlists: Whether to list the configuration
            reset: Whether to reset the configuration
            quota_policy: New quota policy ("abort" or "retry")
            assume_yes: Skip the reset confirmation
            confirm: Callable asking the user a yes/no question
        """
        super().__init__(store, client_factory)
        self.oauth2_json = oauth2_json
        self.add = add
        self.sources = sources or []
        self.remove = remove
        self.list_playlists = list_playlists
        self.reset = reset
        self.quota_policy = quota_policy
        self.assume_yes = assume_yes
        self.confirm = confirm

    def validate(self) -> None:
        """Validate command parameters."""
        if self.sources and not self.add:
            raise ValidationError("--from requires --add")
        if self.quota_policy and self.quota_policy not in QUOTA_POLICIES:
            raise ValidationError(f"Unknown quota policy: {self.quota_policy}")
        if self.add and self.add == self.remove:
            raise ValidationError("Cannot add and remove the same playlist")
        if not any(
            (self.oauth2_json, self.add, self.remove, self.reset, self.quota_policy)
        ):
            # Nothing to change, show the configuration instead
            self.list_playlists = True
        super().validate()

    def _run(self) -> bool:
        configuration = self.store.load()

        if self.reset:
            if not self.assume_yes and not self.confirm(
                "Are you sure you want to reset the configuration?"
            ):
                logger.info("Reset cancelled")
                return True
            configuration.reset()
            self.store.save(configuration)
            logger.info("Configuration reset successfully")
            return True

        changed = False

        if self.oauth2_json is not None:
            path = os.path.abspath(os.path.expanduser(self.oauth2_json))
            if not os.path.isfile(path):
                logger.warning("OAuth2 JSON file %s does not exist yet", path)
            configuration.set_oauth_path(path)
            changed = True
            logger.info("OAuth2 JSON path set to %s", path)

        if self.quota_policy:
            configuration.quota_policy = self.quota_policy
            changed = True
            logger.info("Quota policy set to %s", self.quota_policy)

        if self.add:
            if configuration.get_rule(self.add):
                raise DuplicateTargetError(self.add)
            client = self.get_client(configuration)
            info = client.get_playlist_info(self.add)
            rule = configuration.add_rule(self.add, self.sources, info["title"])
            changed = True
            logger.info("Playlist %s added", rule.display_name)

        if self.remove:
            rule = configuration.remove_rule(self.remove)
            changed = True
            logger.info("Playlist %s removed", rule.display_name)

        if changed:
            self.store.save(configuration)

        if self.list_playlists:
            self.list_configuration(configuration)

        return True

    def list_configuration(self, configuration: Configuration) -> None:
        """Log the credentials path and every configured playlist with its sources."""
        logger.info("OAuth2 JSON path: %s", configuration.oauth2_json or "<not set>")
        logger.info("Quota policy: %s", configuration.quota_policy or "<default>")

        if not configuration.playlists:
            logger.info("No playlists configured")
            return

        logger.info("Configured playlists:")
        for rule in configuration.playlists:
            logger.info("  %s", rule.display_name)
            if not rule.sync_from:
                logger.info("    No sync sources")
                continue
            for source_id in rule.sync_from:
                source = configuration.get_rule(source_id)
                if source:
                    logger.info("    <- %s", source.display_name)
                else:
                    logger.info("    <- %s (untracked playlist)", source_id)
