"""YouTube API authentication handling."""

import os
import pickle
from typing import Callable, List, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from . import config
from .errors import AuthError
from .logging_config import get_logger

logger = get_logger(__name__)

# (client_secrets_file, scopes) -> credentials
Authorizer = Callable[[str, List[str]], object]


def local_server_authorizer(client_secrets_file: str, scopes: List[str]) -> object:
    """Run the installed-app OAuth2 flow in the user's browser.

    Args:
        client_secrets_file: Path to the OAuth2 client JSON downloaded from Google Cloud
        scopes: OAuth2 scopes to request

    Returns:
        Authorized credentials
    """
    flow = InstalledAppFlow.from_client_secrets_file(client_secrets_file, scopes)
    return flow.run_local_server(port=0)


class Authenticator:
    """Obtains OAuth2 credentials, reusing and refreshing a token cache."""

    def __init__(
        self,
        client_secrets_file: Optional[str],
        token_file: Optional[str] = None,
        scopes: Optional[List[str]] = None,
        authorizer: Optional[Authorizer] = None,
    ):
        """Initialize authenticator.

        Args:
            client_secrets_file: Path to the OAuth2 client JSON
            token_file: Path to the token cache, defaults to config.TOKEN_FILE
            scopes: OAuth2 scopes, defaults to config.YOUTUBE_SCOPES
            authorizer: Callable running the interactive consent step
        """
        self.client_secrets_file = client_secrets_file
        self.token_file = token_file or config.TOKEN_FILE
        self.scopes = scopes or config.YOUTUBE_SCOPES
        self.authorizer = authorizer or local_server_authorizer

    def _load_cached(self) -> Optional[object]:
        if not os.path.exists(self.token_file):
            return None
        try:
            with open(self.token_file, "rb") as token:
                creds = pickle.load(token)
        except (OSError, EOFError, pickle.UnpicklingError, AttributeError, ImportError, ValueError) as e:  # noqa: E501
            logger.warning("Ignoring unreadable token cache %s: %s", self.token_file, str(e))
            return None
        if not (hasattr(creds, "valid") and hasattr(creds, "expired")):
            logger.warning(
                "Ignoring token cache %s: %s is not a credentials object",
                self.token_file,
                type(creds).__name__,
            )
            return None
        return creds

    def _save(self, creds: object) -> None:
        token_dir = os.path.dirname(self.token_file)
        try:
            if token_dir:
                os.makedirs(token_dir, exist_ok=True)
            with open(self.token_file, "wb") as token:
                pickle.dump(creds, token)
        except OSError as e:
            raise AuthError(f"Cannot write token cache {self.token_file}: {e}") from e

    def _authorize(self) -> object:
        if not self.client_secrets_file:
            raise AuthError(
                "The path to the OAuth2 JSON file is not set. "
                "Run 'playsync config --oauth2-json PATH' first."
            )
        if not os.path.isfile(self.client_secrets_file):
            raise AuthError(f"OAuth2 JSON file not found: {self.client_secrets_file}")

        logger.info("Opening browser for YouTube authorization...")
        try:
            return self.authorizer(self.client_secrets_file, self.scopes)
        except Exception as e:
            raise AuthError(f"Authentication failed: {str(e)}") from e

    def get_credentials(self) -> object:
        """Get valid credentials, refreshing or re-authorizing when needed.

        Returns:
            Valid credentials

        Raises:
            AuthError: If no valid credentials can be obtained
        """
        creds = self._load_cached()
        if creds and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            try:
                logger.debug("Refreshing expired access token")
                creds.refresh(Request())
            except GoogleAuthError as e:
                logger.warning("Token refresh failed, re-authorizing: %s", str(e))
                creds = None
        else:
            creds = None

        if creds is None:
            creds = self._authorize()
        if not creds:
            raise AuthError("Authentication failed: no credentials returned")

        self._save(creds)
        return creds

    def get_valid_token(self) -> str:
        """Get a valid OAuth2 access token.

        Raises:
            AuthError: If no valid credentials can be obtained
        """
        return self.get_credentials().token

    def build_service(self):
        """Build an authenticated YouTube service object.

        Raises:
            AuthError: If authentication or service construction fails
        """
        creds = self.get_credentials()
        try:
            return build("youtube", "v3", credentials=creds, cache_discovery=False)
        except Exception as e:
            raise AuthError(f"Failed to build YouTube service: {str(e)}") from e


def get_youtube_service(client_secrets_file: Optional[str], token_file: Optional[str] = None):
    """Get an authenticated YouTube service object.

    Raises:
        AuthError: If authentication fails
    """
    return Authenticator(client_secrets_file, token_file).build_service()
