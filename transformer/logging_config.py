"""Console logging for the Streamlit page and the API service."""

import logging
import sys

from transformer.settings import log_level_from_env

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the root logger with a single console handler.

    Safe to call more than once (Streamlit re-runs the script on every
    interaction); existing handlers are replaced.

    Returns:
        The configured root logger.
    """
    level_name = (level or log_level_from_env()).upper()
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)
    return root_logger
