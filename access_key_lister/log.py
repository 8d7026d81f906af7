"""Logger construction for the command line tool."""

import logging
import sys

LOGGER_NAME = "access_key_lister"
LOG_FORMAT = "%(asctime)s\t%(levelname)s\t%(threadName)s\t%(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def create_logger(show_debug: bool = False) -> logging.Logger:
    """Build the logger that is handed to every component.

    INFO and above go to stdout; DEBUG is enabled by show_debug.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if show_debug else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
