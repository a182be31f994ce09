import logging
import os


_DEF_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

LOG_LEVEL_ENV_VAR = "JSON_FIELD_FILTER_LOG_LEVEL"


def init_logging(name: str = "json_field_filter", level=None) -> logging.Logger:
    """Configure the root logger once and return the package logger.

    `level` defaults to $JSON_FIELD_FILTER_LOG_LEVEL, then INFO.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=_DEF_FORMAT)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger
