"""Package-wide logging for ClosetWise.

Handlers live on the ``closetwise`` package logger only. Module loggers
obtained through :func:`get_logger` carry no handlers of their own and
propagate to it, so one call to :func:`configure_logging` (done by the
analytics engine with ``config.log_level``) sets the verbosity of every
calculator at once.

Example:
    >>> from closetwise.utils.logger import configure_logging, get_logger
    >>> configure_logging("DEBUG")
    >>> logger = get_logger(__name__)
"""

import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import colorlog


PACKAGE_LOGGER = "closetwise"

CONSOLE_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}
LOG_FILE_NAME = "closetwise.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _resolve_level(level: Optional[str]) -> int:
    """Explicit level, else LOG_LEVEL env var, else INFO."""
    name = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    return getattr(logging, name, logging.INFO)


def _default_log_dir() -> Path:
    return Path(__file__).parent.parent.parent / "logs"


def _build_handlers(log_dir: Optional[Path]) -> list:
    """Coloured console handler and size-rotated file handler."""
    console = logging.StreamHandler()
    console.setFormatter(
        colorlog.ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT, log_colors=LOG_COLORS)
    )

    log_dir = Path(log_dir) if log_dir is not None else _default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return [console, file_handler]


def configure_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    force: bool = False,
) -> logging.Logger:
    """Attach handlers to the package logger and set its level.

    Handlers are attached once. Later calls with a ``level`` only change
    the level; ``force`` drops the existing handlers and rebuilds them
    (for example to write into another ``log_dir``).

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive).
        log_dir: Directory for the rotating log file (default: logs/).
        force: Replace already attached handlers.

    Returns:
        The ``closetwise`` package logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    if force:
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()

    if not package_logger.handlers:
        log_level = _resolve_level(level)
        for handler in _build_handlers(log_dir):
            handler.setLevel(log_level)
            package_logger.addHandler(handler)
        package_logger.setLevel(log_level)
        package_logger.propagate = False
    elif level is not None:
        set_log_level(package_logger, level)

    return package_logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return a logger inside the ``closetwise`` namespace.

    Names outside the namespace are nested under it so that every logger
    shares the package handlers and level.

    Args:
        name: Logger name, typically ``__name__``.
        level: Optional level pinned on this logger only. Leave unset to
            follow the package level.
    """
    configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(_resolve_level(level))
    return logger


@contextmanager
def log_execution_time(logger: logging.Logger, operation: str):
    """Log at DEBUG how long the wrapped block took, even if it raises.

    Usage:
        with log_execution_time(logger, "monthly confidence metrics"):
            aggregator.generate_monthly_confidence_metrics(user_id)
    """
    logger.debug(f"Starting: {operation}")
    started = time.perf_counter()
    try:
        yield
    finally:
        logger.debug(f"Completed: {operation} in {time.perf_counter() - started:.3f}s")


def set_log_level(logger: logging.Logger, level: str) -> None:
    """Set the level of a logger and of the handlers attached to it."""
    log_level = _resolve_level(level)
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)
    logger.debug(f"Log level set to {logging.getLevelName(log_level)}")


def log_exception(logger: logging.Logger, operation: str, exception: Exception) -> None:
    """Log a failed operation with the error's code and context when it has them."""
    details = exception.to_dict() if hasattr(exception, "to_dict") else {"message": str(exception)}
    logger.error(f"Failed: {operation} ({details})", exc_info=True)
