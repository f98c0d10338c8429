"""
Logging Configuration
Attaches handlers to the 'coastertrack' logger for the CLI and interactive use.

Library modules only call `logging.getLogger(__name__)`; nothing below runs
unless an application asks for it.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "coastertrack"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Third-party loggers that are chatty at DEBUG while plotting or exporting
NOISY_LIBRARIES = ("matplotlib", "PIL", "h5py", "pyvista")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown logging level: {level!r}")
        return value
    return level


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger with a stdout handler and an optional file.

    Calling it again replaces the previous handlers, so the level can be
    changed between runs in one session.

    Args:
        level: Logging level as int (logging.DEBUG) or name ("DEBUG").
        log_file: Optional path; the file is overwritten.

    Returns:
        The configured package logger.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), level))

    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger
