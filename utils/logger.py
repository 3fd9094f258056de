"""
utils/logger.py
---------------
Logging setup shared by the bot, the schema script and the seed script.
Modules call `get_logger(__name__)`; the first call installs a stdout handler
on the root logger at the level named by LOG_LEVEL.
"""

import logging
import sys

from config import LOG_LEVEL

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# One INFO line per HTTP request otherwise (Telegram polling, Open Library).
_QUIET_LOGGERS = ("httpx", "httpcore", "telegram.ext.Application")

_configured = False


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install the stdout handler once. Later calls only change the level."""
    global _configured
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
    root.addHandler(handler)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Named logger; configures logging on first use."""
    if not _configured:
        configure_logging()
    return logging.getLogger(name)
