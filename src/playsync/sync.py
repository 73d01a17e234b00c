"""Sync engine: append missing source videos to target playlists."""

from typing import List, Optional, Set

from tqdm import tqdm

from .api import YouTubeAPI
from .errors import ApiError, QuotaExceededError, SyncAborted, ValidationError
from .logging_config import get_logger
from .models import Configuration, RuleReport, SyncRule, VideoReference

logger = get_logger(__name__)


def plan_additions(
    target_items: List[VideoReference], sources: List[List[VideoReference]]
) -> tuple:
    """Compute which source videos are missing from the target.

    Args:
        target_items: Entries already in the target playlist
        sources: Entries of each source playlist, in configuration order

    Returns:
        Tuple of (videos to add in insertion order, number of duplicates skipped)
    """
    seen: Set[str] = {item.video_id for item in target_items}
    to_add: List[VideoReference] = []
    skipped = 0

    for items in sources:
        for item in items:
            if item.video_id in seen:
                skipped += 1
                continue
            seen.add(item.video_id)
            to_add.append(item)

    return to_add, skipped


class SyncEngine:
    """Synchronizes configured target playlists from their sources."""

    def __init__(self, client: YouTubeAPI, dry_run: bool = False, show_progress: bool = False):
        """Initialize sync engine.

        Args:
            client: Playlist client
            dry_run: Report what would be added without inserting anything
            show_progress: Show a progress bar while inserting
        """
        self.client = client
        self.dry_run = dry_run
        self.show_progress = show_progress

    def sync_rule(self, rule: SyncRule) -> RuleReport:
        """Sync one target playlist from its sources.

        Args:
            rule: The rule to sync

        Returns:
            Report of the pass

        Raises:
            SyncAborted: If the API quota ran out, carrying the partial report
            ApiError: If a playlist cannot be listed
        """
        name = rule.title or rule.id
        report = RuleReport(playlist_id=rule.id, title=rule.title, dry_run=self.dry_run)

        target_items = self.client.list_items(rule.id)
        sources = []
        for source_id in rule.sync_from:
            sources.append(self.client.list_items(source_id))

        report.to_add, report.skipped = plan_additions(target_items, sources)
        logger.info("Found %d videos to sync to '%s'", len(report.to_add), name)

        if self.dry_run:
            for video in report.to_add:
                logger.info("  Would add: %s", video)
            return report

        videos = tqdm(
            report.to_add,
            desc=f"Adding to {name}",
            unit="video",
            disable=not self.show_progress or not report.to_add,
        )
        for video in videos:
            try:
                self.client.insert_item(rule.id, video.video_id)
            except QuotaExceededError as e:
                report.failures.append((video, str(e)))
                report.aborted = True
                logger.error("Quota exceeded while syncing '%s', stopping", name)
                raise SyncAborted(e, [report]) from e
            except ApiError as e:
                report.failures.append((video, str(e)))
                logger.warning("Failed to add '%s': %s", video, str(e))
                continue
            report.added.append(video)
            logger.debug("Added: %s", video)

        return report

    def run(self, configuration: Configuration, playlist_id: Optional[str] = None) -> List[RuleReport]:
        """Sync every configured rule, or only the one for playlist_id.

        Args:
            configuration: Loaded configuration
            playlist_id: Optional ID of the single target playlist to sync

        Returns:
            One report per synced rule, in configuration order

        Raises:
            ValidationError: If playlist_id is not configured
            SyncAborted: If the API quota ran out
            ApiError: If a playlist cannot be listed
        """
        if playlist_id:
            rule = configuration.get_rule(playlist_id)
            if rule is None:
                raise ValidationError(f"Playlist {playlist_id} is not configured")
            rules = [rule]
        else:
            rules = list(configuration.playlists)

        reports: List[RuleReport] = []
        for rule in rules:
            if not rule.sync_from:
                logger.info("Skipping '%s': no sync sources", rule.title or rule.id)
                continue
            try:
                reports.append(self.sync_rule(rule))
            except SyncAborted as e:
                raise SyncAborted(e.cause, reports + e.reports) from e.cause
            except QuotaExceededError as e:
                raise SyncAborted(e, reports) from e

        return reports
