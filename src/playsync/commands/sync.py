"""Sync command: bring target playlists up to date with their sources."""

from typing import List, Optional

from ..config import QUOTA_POLICIES
from ..errors import AuthError, SyncAborted, ValidationError
from ..logging_config import get_logger
from ..models import RuleReport
from ..quota import QuotaTracker
from ..store import ConfigStore
from ..sync import SyncEngine
from .base import ClientFactory, Command

logger = get_logger(__name__)


def log_reports(reports: List[RuleReport]) -> None:
    """Log the summary and failures of each rule."""
    for report in reports:
        logger.info("%s: %s", report.title or report.playlist_id, report.summary())
        for video, reason in report.failures:
            logger.warning("  Failed to add %s: %s", video, reason)


class SyncCommand(Command):
    """Command for syncing configured playlists."""

    def __init__(
        self,
        store: ConfigStore,
        client_factory: Optional[ClientFactory] = None,
        playlist_id: Optional[str] = None,
        dry_run: bool = False,
        quota_policy: Optional[str] = None,
        show_progress: bool = False,
    ) -> None:
        """Initialize command.

        Args:
            store: Configuration store
            client_factory: Builds the authenticated playlist client
            playlist_id: Optional ID of the only target playlist to sync
            dry_run: Whether to only report what would be added
            quota_policy: Overrides the configured quota policy
            show_progress: Whether to show a progress bar while inserting
        """
        super().__init__(store, client_factory)
        self.playlist_id = playlist_id
        self.dry_run = dry_run
        self.quota_policy = quota_policy
        self.show_progress = show_progress
        self.reports: List[RuleReport] = []

    def validate(self) -> None:
        """Validate command parameters."""
        if self.quota_policy and self.quota_policy not in QUOTA_POLICIES:
            raise ValidationError(f"Unknown quota policy: {self.quota_policy}")
        super().validate()

    def _run(self) -> bool:
        configuration = self.store.load()

        if not configuration.oauth2_json:
            raise AuthError(
                "The path to the OAuth2 JSON file is not set. "
                "Run 'playsync config --oauth2-json PATH' first."
            )
        if self.playlist_id and configuration.get_rule(self.playlist_id) is None:
            raise ValidationError(f"Playlist {self.playlist_id} is not configured")
        if not configuration.playlists:
            logger.info("No playlists found to sync")
            return True

        client = self.get_client(configuration, self.quota_policy)
        engine = SyncEngine(client, dry_run=self.dry_run, show_progress=self.show_progress)

        try:
            self.reports = engine.run(configuration, self.playlist_id)
        except SyncAborted as e:
            self.reports = e.reports
            log_reports(self.reports)
            raise

        log_reports(self.reports)
        tracker: QuotaTracker = client.tracker
        if self.dry_run:
            pending = sum(len(report.to_add) for report in self.reports)
            logger.info(
                "Dry run completed, adding %d videos would cost about %d quota units",
                pending,
                tracker.estimate_inserts(pending),
            )
        else:
            logger.info("Sync completed, %d quota units used", tracker.used)
        return True
