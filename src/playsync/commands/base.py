"""Base command class for playsync operations."""

from typing import Callable, Optional

from ..api import YouTubeAPI
from ..errors import AuthError
from ..logging_config import get_logger
from ..models import Configuration
from ..store import ConfigStore

# Get logger for this module
logger = get_logger(__name__)

# (configuration, quota_policy) -> playlist client
ClientFactory = Callable[[Configuration, Optional[str]], YouTubeAPI]


class Command:
    """Base class for playsync commands."""

    def __init__(self, store: ConfigStore, client_factory: Optional[ClientFactory] = None):
        """Initialize command.

        Args:
            store: Configuration store
            client_factory: Builds an authenticated playlist client on first use
        """
        self.store = store
        self.client_factory = client_factory
        self._client: Optional[YouTubeAPI] = None
        self._logger = logger
        self._validated = False

    def validate(self) -> None:
        """Validate command parameters.

        Raises:
            ValidationError: If parameters are invalid
        """
        self._validated = True

    def run(self) -> bool:
        """Validate and run the command.

        Returns:
            bool: True if successful, False otherwise

        Raises:
            PlaysyncError: If command fails
        """
        self.validate()
        return self._run()

    def _run(self) -> bool:
        """Internal run implementation.

        Returns:
            bool: True if successful, False otherwise
        """
        return False

    def get_client(self, configuration: Configuration, quota_policy: Optional[str] = None) -> YouTubeAPI:
        """Get the playlist client, authenticating on first use.

        Raises:
            AuthError: If the OAuth2 path is not set or authentication fails
        """
        if self._client is not None:
            return self._client
        if not configuration.oauth2_json:
            raise AuthError(
                "The path to the OAuth2 JSON file is not set. "
                "Run 'playsync config --oauth2-json PATH' first."
            )
        if self.client_factory is None:
            raise AuthError("No YouTube client available")
        self._client = self.client_factory(configuration, quota_policy or configuration.quota_policy)
        return self._client
