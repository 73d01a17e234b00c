"""YouTube API wrapper."""

from typing import Dict, List, Optional

from googleapiclient.errors import HttpError

from . import config
from .errors import (
    NETWORK_ERRORS,
    PlaylistNotFoundError,
    QuotaExceededError,
    RateLimitError,
    api_error_from_http,
    with_retry,
)
from .logging_config import get_logger
from .models import VideoReference
from .quota import QuotaTracker

logger = get_logger(__name__)


class YouTubeAPI:
    """Wrapper for the playlist operations of the YouTube Data API."""

    def __init__(
        self,
        youtube,
        quota_policy: Optional[str] = None,
        quota_retry_delay: Optional[float] = None,
        quota_max_retries: Optional[int] = None,
        tracker: Optional[QuotaTracker] = None,
    ):
        """Initialize API wrapper.

        Args:
            youtube: YouTube API client from googleapiclient.discovery.build
            quota_policy: "abort" to surface quota errors at once, "retry" to wait and retry
            quota_retry_delay: Seconds to wait before retrying after a quota error
            quota_max_retries: Number of retries after a quota error
            tracker: Quota tracker charged for every request
        """
        self.youtube = youtube
        self.quota_policy = quota_policy or config.QUOTA_POLICY
        self.quota_retry_delay = (
            config.QUOTA_RETRY_DELAY if quota_retry_delay is None else quota_retry_delay
        )
        self.quota_max_retries = (
            config.QUOTA_MAX_RETRIES if quota_max_retries is None else quota_max_retries
        )
        self.tracker = tracker or QuotaTracker()

    def _execute(
        self, request, operation: str, context: str, retry_transient: bool = True
    ) -> Dict:
        """Execute a request, translating HttpError and network failures.

        Inserts pass retry_transient=False and are never retried on transient errors.

        Args:
            request: googleapiclient request object
            operation: API method name used for quota accounting
            context: Message prefix for errors
            retry_transient: Whether to retry rate limiting, 5xx and network errors

        Returns:
            Response body

        Raises:
            ApiError: If the request fails
        """

        def execute_once() -> Dict:
            self.tracker.charge(operation)
            try:
                return request.execute()
            except HttpError as e:
                raise api_error_from_http(e, context) from e
            except NETWORK_ERRORS as e:
                raise RateLimitError(f"{context}: network error: {e}") from e

        if retry_transient:
            execute_once = with_retry()(execute_once)

        if self.quota_policy != "retry":
            return execute_once()

        retrying = with_retry(
            max_retries=self.quota_max_retries,
            initial_delay=self.quota_retry_delay,
            max_delay=self.quota_retry_delay,
            backoff_factor=1.0,
            retryable_exceptions=(QuotaExceededError,),
        )(execute_once)
        return retrying()

    def get_playlist_info(self, playlist_id: str) -> Dict[str, str]:
        """Get playlist information.

        Args:
            playlist_id: ID of playlist to get info for

        Returns:
            Dictionary with playlist id, title and description

        Raises:
            PlaylistNotFoundError: If playlist is not found
            ApiError: If API request fails
        """
        request = self.youtube.playlists().list(part="snippet", id=playlist_id, maxResults=1)
        response = self._execute(
            request, "playlists.list", f"Failed to get playlist {playlist_id}"
        )

        if not response.get("items"):
            raise PlaylistNotFoundError(f"Playlist {playlist_id} not found", 404, "playlistNotFound")

        snippet = response["items"][0].get("snippet", {})
        return {
            "id": playlist_id,
            "title": snippet.get("title", ""),
            "description": snippet.get("description", ""),
        }

    def list_items(self, playlist_id: str) -> List[VideoReference]:
        """Get all entries of a playlist, in playlist order.

        Args:
            playlist_id: ID of playlist to list

        Returns:
            List of video references

        Raises:
            PlaylistNotFoundError: If playlist is not found
            QuotaExceededError: If the API quota is exhausted
            ApiError: If API request fails
        """
        videos = []
        page_token = None

        while True:
            request = self.youtube.playlistItems().list(
                part="snippet,contentDetails",
                playlistId=playlist_id,
                maxResults=config.PAGE_SIZE,
                pageToken=page_token,
            )
            response = self._execute(
                request, "playlistItems.list", f"Failed to list playlist {playlist_id}"
            )

            for item in response.get("items", []):
                snippet = item.get("snippet", {})
                video_id = item.get("contentDetails", {}).get("videoId") or snippet.get(
                    "resourceId", {}
                ).get("videoId")
                if not video_id:
                    logger.debug("Skipping entry %s without a video id", item.get("id"))
                    continue
                videos.append(
                    VideoReference(
                        video_id=video_id,
                        item_id=item.get("id", ""),
                        title=snippet.get("title", ""),
                    )
                )

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.debug("Playlist %s has %d videos", playlist_id, len(videos))
        return videos

    def insert_item(self, playlist_id: str, video_id: str) -> str:
        """Append a video to a playlist.

        Args:
            playlist_id: ID of playlist to add to
            video_id: ID of video to add

        Returns:
            ID of the new playlist item

        Raises:
            QuotaExceededError: If the API quota is exhausted
            ApiError: If the API rejects the insertion
        """
        request = self.youtube.playlistItems().insert(
            part="snippet",
            body={
                "snippet": {
                    "playlistId": playlist_id,
                    "resourceId": {"kind": "youtube#video", "videoId": video_id},
                }
            },
        )
        response = self._execute(
            request,
            "playlistItems.insert",
            f"Failed to add video {video_id}",
            retry_transient=False,
        )
        return response.get("id", "")
