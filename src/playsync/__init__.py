"""Keep YouTube playlists in sync with their source playlists."""

__version__ = "0.1.0"

# Import all public components
from .api import YouTubeAPI
from .auth import Authenticator, get_youtube_service
from .cli import main
from .commands import Command, ConfigCommand, SyncCommand
from .errors import (
    ApiError,
    AuthError,
    ConfigError,
    PlaysyncError,
    QuotaExceededError,
    SyncAborted,
    ValidationError,
)
from .logging_config import configure_logging, get_logger
from .models import Configuration, RuleReport, SyncRule, VideoReference
from .quota import QuotaTracker
from .store import ConfigStore
from .sync import SyncEngine, plan_additions

# Import config variables
from .config import (  # noqa: F401
    YOUTUBE_SCOPES,
    CONFIG_DIR,
    CONFIG_FILE,
    TOKEN_FILE,
)
