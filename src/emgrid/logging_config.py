"""
Logging Configuration
Attaches console and file handlers to the 'emgrid' logger.

Library code only creates module loggers (``logging.getLogger(__name__)``);
handlers are installed by the embedding application through
``setup_logging`` and removed again with ``reset_logging``.
"""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "emgrid"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        return resolved
    return level


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the grid engine logger.

    Args:
        level: Logging level, as a number (logging.DEBUG) or a name ("debug").
        log_file: Optional path of a log file, overwritten on each call.

    Returns:
        The 'emgrid' logger.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    reset_logging()
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger


def reset_logging() -> None:
    """Closes and removes every handler installed on the 'emgrid' logger."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
