"""Package logger for playsync.

Everything the CLI reports goes through the ``playsync`` logger, which writes
to stdout and does not propagate to the root logger.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


logger: logging.Logger = logging.getLogger("playsync")
console_handler = _build_console_handler()
logger.addHandler(console_handler)
logger.propagate = False


def set_level(level: int) -> None:
    """Apply level to the package logger and its console handler."""
    logger.setLevel(level)
    console_handler.setLevel(level)


def enable_debug() -> None:
    set_level(logging.DEBUG)


def disable_debug() -> None:
    set_level(logging.INFO)


def configure_logging(debug: bool = False) -> None:
    """Switch between DEBUG and INFO output (the CLI's --debug flag)."""
    set_level(logging.DEBUG if debug else logging.INFO)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a child of it for name.

    Module names already under ``playsync`` are used as is; anything else is
    nested below the package logger.
    """
    if not name:
        return logger
    if name == "playsync" or name.startswith("playsync."):
        return logging.getLogger(name)
    return logging.getLogger(f"playsync.{name}")


set_level(logging.INFO)
