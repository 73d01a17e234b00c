"""YouTube API quota accounting."""

from typing import Dict

from .logging_config import get_logger

logger = get_logger(__name__)

# Quota units charged by the YouTube Data API v3 per request
QUOTA_COSTS: Dict[str, int] = {
    "playlists.list": 1,
    "playlistItems.list": 1,
    "playlistItems.insert": 50,
}

DAILY_QUOTA = 10000


class QuotaTracker:
    """Tracks quota units spent during one invocation."""

    def __init__(self) -> None:
        self.used = 0
        self.calls: Dict[str, int] = {}

    def charge(self, operation: str) -> int:
        """Record one request.

        Args:
            operation: API method name, e.g. "playlistItems.insert"

        Returns:
            Units charged for the request
        """
        cost = QUOTA_COSTS.get(operation, 1)
        self.used += cost
        self.calls[operation] = self.calls.get(operation, 0) + 1
        logger.debug("%s charged %d units (%d total)", operation, cost, self.used)
        return cost

    @staticmethod
    def estimate_inserts(count: int) -> int:
        return count * QUOTA_COSTS["playlistItems.insert"]

    def reset(self) -> None:
        self.used = 0
        self.calls = {}
