"""Logging setup shared by the app and the uvicorn entry point."""

import logging
import sys

from marketplace.core.config import get_settings

# Libraries whose INFO output drowns out request handling
QUIET_LOGGERS = ("pymongo", "uvicorn.access")


def setup_logging() -> None:
    """Send every record to stdout at LOG_LEVEL, or DEBUG when DEBUG is on."""
    settings = get_settings()
    level = "DEBUG" if settings.debug else settings.log_level

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    if not settings.debug:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
