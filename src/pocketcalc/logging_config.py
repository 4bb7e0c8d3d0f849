"""
Logging Configuration
=====================
One call at startup wires the package logger to stdout and, when
POCKETCALC_LOG_FILE is set, to a log file.

Every module logs through `logging.getLogger(__name__)`, so all records end up
under the package logger configured here.
"""
import logging
import os
import sys
from typing import Optional

from pocketcalc import config

PACKAGE_LOGGER = __name__.partition(".")[0]

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _file_handler(path: str, formatter: logging.Formatter) -> logging.Handler:
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    # Appends, so a session log survives the next launch
    handler = logging.FileHandler(path, mode='a', encoding='utf-8')
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level. Defaults to `config.LOG_LEVEL`.
        log_file: Extra file to log to. Defaults to `config.LOG_FILE`.

    Returns:
        The configured package logger.
    """
    if level is None:
        level = config.LOG_LEVEL
    if log_file is None:
        log_file = config.LOG_FILE

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        logger.addHandler(_file_handler(log_file, formatter))

    logger.debug(f"Logging at {logging.getLevelName(level)}, file: {log_file or 'none'}")
    logger.info("Logging initialized.")
    return logger
