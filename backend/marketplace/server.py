"""Process entry point: validate configuration, then serve with uvicorn."""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from marketplace.core.config import get_settings

logger = logging.getLogger(__name__)


def run() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig(level=logging.ERROR)
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors() if err["loc"])
        logger.error("Invalid configuration (%s): %s", missing, e)
        sys.exit(1)

    uvicorn.run(
        "marketplace.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
