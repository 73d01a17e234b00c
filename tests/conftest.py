"""Common test fixtures and utilities."""

import json
from types import SimpleNamespace
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from playsync.errors import ApiError, PlaylistNotFoundError, QuotaExceededError
from playsync.models import VideoReference
from playsync.quota import QuotaTracker
from playsync.store import ConfigStore


def make_http_error(status: int, reason: Optional[str] = None, message: str = "error") -> HttpError:
    """Build an HttpError with a YouTube-style JSON error body."""
    body = {"error": {"code": status, "message": message}}
    if reason:
        body["error"]["errors"] = [{"reason": reason, "message": message}]
    resp = SimpleNamespace(status=status, reason=message)
    return HttpError(resp, json.dumps(body).encode("utf-8"))


def playlist_item(video_id: str, item_id: Optional[str] = None, title: Optional[str] = None) -> Dict:
    """Build a playlistItems.list resource."""
    return {
        "id": item_id or f"item-{video_id}",
        "snippet": {
            "title": title or f"Video {video_id}",
            "resourceId": {"kind": "youtube#video", "videoId": video_id},
        },
        "contentDetails": {"videoId": video_id},
    }


class FakePlaylistClient:
    """In-memory stand-in for YouTubeAPI."""

    def __init__(self, playlists: Dict[str, List[str]], titles: Optional[Dict[str, str]] = None):
        self.playlists = {pid: list(videos) for pid, videos in playlists.items()}
        self.titles = titles or {}
        self.inserted: List[tuple] = []
        self.failures: Dict[str, ApiError] = {}
        self.quota_after: Optional[int] = None
        self.quota_on_list: set = set()
        self.listed: List[str] = []
        self.tracker = QuotaTracker()

    def get_playlist_info(self, playlist_id: str) -> Dict[str, str]:
        if playlist_id not in self.playlists:
            raise PlaylistNotFoundError(f"Playlist {playlist_id} not found", 404, "playlistNotFound")
        return {"id": playlist_id, "title": self.titles.get(playlist_id, ""), "description": ""}

    def list_items(self, playlist_id: str) -> List[VideoReference]:
        self.listed.append(playlist_id)
        if playlist_id in self.quota_on_list:
            raise QuotaExceededError("quota exceeded", 403, "quotaExceeded")
        if playlist_id not in self.playlists:
            raise PlaylistNotFoundError(f"Playlist {playlist_id} not found", 404, "playlistNotFound")
        self.tracker.charge("playlistItems.list")
        return [
            VideoReference(video_id=vid, item_id=f"{playlist_id}-{i}", title=f"Video {vid}")
            for i, vid in enumerate(self.playlists[playlist_id])
        ]

    def insert_item(self, playlist_id: str, video_id: str) -> str:
        if self.quota_after is not None and len(self.inserted) >= self.quota_after:
            raise QuotaExceededError("quota exceeded", 403, "quotaExceeded")
        if video_id in self.failures:
            raise self.failures[video_id]
        self.tracker.charge("playlistItems.insert")
        self.inserted.append((playlist_id, video_id))
        self.playlists[playlist_id].append(video_id)
        return f"new-{video_id}"


@pytest.fixture
def store(tmp_path) -> ConfigStore:
    """Create a configuration store in a temporary directory."""
    return ConfigStore(str(tmp_path / "playsync" / "config.json"))


@pytest.fixture
def youtube_client() -> MagicMock:
    """Create a mock YouTube API client.

    Returns:
        MagicMock: Mock YouTube API client with common methods configured
    """
    mock = MagicMock()

    mock.playlistItems.return_value.list.return_value.execute.return_value = {
        "items": [playlist_item("vid1", "item1"), playlist_item("vid2", "item2")]
    }
    mock.playlistItems.return_value.insert.return_value.execute.return_value = {"id": "new-item"}
    mock.playlists.return_value.list.return_value.execute.return_value = {
        "items": [
            {
                "id": "playlist1",
                "snippet": {"title": "Playlist 1", "description": "Description 1"},
            }
        ]
    }

    return mock
