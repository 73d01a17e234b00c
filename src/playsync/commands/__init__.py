"""Command module initialization."""

from .base import Command
from .config import ConfigCommand  # noqa: F401
from .sync import SyncCommand  # noqa: F401

__all__ = ["Command", "ConfigCommand", "SyncCommand"]
