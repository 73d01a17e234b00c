"""Configuration and environment settings."""

import os
from dotenv import load_dotenv
from platformdirs import user_config_dir

load_dotenv()

APP_NAME = "playsync"

# Directory Settings
# Per-user config directory of the platform (XDG on Linux, Application Support
# on macOS, %APPDATA% on Windows) unless PLAYSYNC_CONFIG_DIR overrides it
CONFIG_DIR = os.getenv("PLAYSYNC_CONFIG_DIR") or user_config_dir(APP_NAME, appauthor=False)
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")
TOKEN_FILE = os.path.join(CONFIG_DIR, "token_cache.pickle")

# YouTube API Settings
YOUTUBE_SCOPES = ["https://www.googleapis.com/auth/youtube"]
PAGE_SIZE = 50  # Maximum allowed by playlistItems.list

# Quota Settings
QUOTA_POLICIES = ("abort", "retry")
QUOTA_POLICY = os.getenv("PLAYSYNC_QUOTA_POLICY", "abort")
QUOTA_RETRY_DELAY = float(os.getenv("PLAYSYNC_QUOTA_RETRY_DELAY", "60"))
QUOTA_MAX_RETRIES = int(os.getenv("PLAYSYNC_QUOTA_MAX_RETRIES", "3"))
