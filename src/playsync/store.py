"""Configuration file storage."""

import json
import os
import tempfile
from typing import List, Optional

from . import config
from .errors import ConfigError
from .logging_config import get_logger
from .models import Configuration, SyncRule

logger = get_logger(__name__)


class ConfigStore:
    """JSON file holding the playsync configuration."""

    def __init__(self, path: Optional[str] = None) -> None:
        """Initialize configuration store.

        Args:
            path: Path to configuration file, defaults to config.CONFIG_FILE
        """
        self.path = path or config.CONFIG_FILE

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> Configuration:
        """Load configuration from file.

        A missing file is a first run and yields an empty configuration.

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        if not self.exists():
            logger.debug("No configuration at %s, starting empty", self.path)
            return Configuration()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            raise ConfigError(f"Configuration file {self.path} is corrupt: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {self.path}: {e}") from e

        return Configuration.from_dict(data)

    def save(self, configuration: Configuration) -> None:
        """Atomically write configuration to file.

        Args:
            configuration: Configuration to persist

        Raises:
            ConfigError: If the file cannot be written
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, prefix=".config-", suffix=".tmp", delete=False
            ) as f:
                tmp_path = f.name
                json.dump(configuration.to_dict(), f, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise ConfigError(f"Cannot write configuration file {self.path}: {e}") from e

        logger.debug("Saved configuration to %s", self.path)

    def add_rule(self, target_id: str, source_ids: List[str], title: str = "") -> SyncRule:
        """Add a rule and persist the configuration.

        Raises:
            DuplicateTargetError: If the target is already configured
        """
        configuration = self.load()
        rule = configuration.add_rule(target_id, source_ids, title)
        self.save(configuration)
        return rule

    def remove_rule(self, target_id: str) -> SyncRule:
        """Remove a rule and persist the configuration.

        Raises:
            RuleNotFoundError: If the target is not configured
        """
        configuration = self.load()
        rule = configuration.remove_rule(target_id)
        self.save(configuration)
        return rule

    def reset(self) -> None:
        """Clear all rules and settings."""
        self.save(Configuration())
