"""Logging setup for the schema_bridge package."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HANDLER_NAME = "schema_bridge.stderr"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Send schema_bridge logs to the current stderr at the given level.

    Calling it again replaces the handler installed by the previous call.
    """
    logger = logging.getLogger("schema_bridge")
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name(HANDLER_NAME)
    logger.addHandler(handler)
    return logger
