import logging
import time

from sheep_dashboard import config

LOG_FORMAT = "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configure logging for the dashboard.

    Streamlit re-executes the page on every rerun; basicConfig is a no-op once
    the root logger has a handler, so repeated calls only adjust the level.
    """
    level = (level or config.LOG_LEVEL).upper()

    formatter = logging.Formatter(LOG_FORMAT)
    formatter.converter = time.gmtime
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=[handler])

    package_logger = logging.getLogger("sheep_dashboard")
    package_logger.setLevel(level)
    return package_logger
