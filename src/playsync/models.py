"""Data models for configuration and sync passes."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .config import QUOTA_POLICIES
from .errors import ConfigError, DuplicateTargetError, RuleNotFoundError


@dataclass
class SyncRule:
    """A target playlist and the playlists it is synced from."""

    id: str
    title: str = ""
    sync_from: List[str] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return f"{self.title} (ID: {self.id})" if self.title else self.id

    def to_dict(self) -> Dict:
        data = {"id": self.id, "title": self.title}
        if self.sync_from:
            data["sync_from"] = list(self.sync_from)
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "SyncRule":
        """Build a rule from its JSON representation.

        Raises:
            ConfigError: If the entry is malformed
        """
        if not isinstance(data, dict) or not isinstance(data.get("id"), str) or not data["id"]:
            raise ConfigError(f"Invalid playlist entry: {data!r}")
        sync_from = data.get("sync_from") or []
        if not isinstance(sync_from, list) or not all(isinstance(s, str) for s in sync_from):
            raise ConfigError(f"Invalid sync_from for playlist {data['id']}: {sync_from!r}")
        title = data.get("title") or ""
        if not isinstance(title, str):
            raise ConfigError(f"Invalid title for playlist {data['id']}: {title!r}")
        return cls(id=data["id"], title=title, sync_from=list(sync_from))


@dataclass
class Configuration:
    """Credentials path, quota policy and the configured sync rules."""

    oauth2_json: Optional[str] = None
    quota_policy: Optional[str] = None
    playlists: List[SyncRule] = field(default_factory=list)

    def get_rule(self, playlist_id: str) -> Optional[SyncRule]:
        for rule in self.playlists:
            if rule.id == playlist_id:
                return rule
        return None

    def set_oauth_path(self, path: Optional[str]) -> None:
        self.oauth2_json = path

    def add_rule(self, target_id: str, source_ids: List[str], title: str = "") -> SyncRule:
        """Add a target playlist with its sources.

        Args:
            target_id: ID of the playlist videos are added to
            source_ids: IDs of the playlists videos are taken from
            title: Title of the target playlist

        Returns:
            The new rule

        Raises:
            DuplicateTargetError: If the target is already configured
            ConfigError: If a source is the target itself or already syncs from it
        """
        if self.get_rule(target_id):
            raise DuplicateTargetError(target_id)

        sources: List[str] = []
        for source_id in source_ids:
            if source_id == target_id:
                raise ConfigError(f"Playlist {target_id} cannot sync from itself")
            source_rule = self.get_rule(source_id)
            if source_rule and target_id in source_rule.sync_from:
                raise ConfigError(
                    f"Playlist {source_id} already syncs from {target_id}; "
                    "refusing to create a cycle"
                )
            if source_id not in sources:
                sources.append(source_id)

        rule = SyncRule(id=target_id, title=title, sync_from=sources)
        self.playlists.append(rule)
        return rule

    def remove_rule(self, target_id: str) -> SyncRule:
        """Remove a configured playlist.

        Raises:
            RuleNotFoundError: If the playlist is not configured
        """
        rule = self.get_rule(target_id)
        if rule is None:
            raise RuleNotFoundError(target_id)
        self.playlists.remove(rule)
        return rule

    def reset(self) -> None:
        self.oauth2_json = None
        self.quota_policy = None
        self.playlists = []

    def to_dict(self) -> Dict:
        data: Dict = {}
        if self.oauth2_json:
            data["oauth2_json"] = self.oauth2_json
        if self.quota_policy:
            data["quota_policy"] = self.quota_policy
        data["playlists"] = [rule.to_dict() for rule in self.playlists]
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Configuration":
        """Build a configuration from its JSON representation.

        Raises:
            ConfigError: If the data is malformed
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")
        oauth2_json = data.get("oauth2_json")
        if oauth2_json is not None and not isinstance(oauth2_json, str):
            raise ConfigError(f"Invalid oauth2_json: {oauth2_json!r}")
        quota_policy = data.get("quota_policy")
        if quota_policy is not None and quota_policy not in QUOTA_POLICIES:
            raise ConfigError(
                f"Invalid quota_policy {quota_policy!r}, expected one of {', '.join(QUOTA_POLICIES)}"
            )
        playlists = data.get("playlists", [])
        if not isinstance(playlists, list):
            raise ConfigError("playlists must be a list")

        config = cls(oauth2_json=oauth2_json, quota_policy=quota_policy)
        for entry in playlists:
            rule = SyncRule.from_dict(entry)
            if config.get_rule(rule.id):
                raise ConfigError(f"Playlist {rule.id} is configured more than once")
            config.playlists.append(rule)
        return config


@dataclass
class VideoReference:
    """A single entry of a playlist."""

    video_id: str
    item_id: str = ""
    title: str = ""

    def __str__(self) -> str:
        return f"{self.title} ({self.video_id})" if self.title else self.video_id


@dataclass
class RuleReport:
    """Outcome of syncing one rule."""

    playlist_id: str
    title: str = ""
    to_add: List[VideoReference] = field(default_factory=list)
    added: List[VideoReference] = field(default_factory=list)
    skipped: int = 0
    failures: List[Tuple[VideoReference, str]] = field(default_factory=list)
    dry_run: bool = False
    aborted: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures and not self.aborted

    def summary(self) -> str:
        if self.dry_run:
            text = f"{len(self.to_add)} to add, {self.skipped} skipped (duplicate)"
        else:
            text = f"{len(self.added)} added, {self.skipped} skipped (duplicate)"
        if self.failures:
            text += f", {len(self.failures)} failed"
        if self.aborted:
            text += " (aborted)"
        return text
