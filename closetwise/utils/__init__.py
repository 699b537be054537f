"""Utility modules for configuration, logging, and error handling."""

from .config import AppConfig, get_config, load_config, reset_config
from .exceptions import (
    AppException,
    ConflictError,
    InvalidInputError,
    LedgerUnavailableError,
    NotActiveError,
    NotFoundError,
    NotTargetedError,
)
from .logger import (
    configure_logging,
    get_logger,
    log_exception,
    log_execution_time,
    set_log_level,
)

__all__ = [
    # Configuration
    "AppConfig",
    "get_config",
    "load_config",
    "reset_config",
    # Exceptions
    "AppException",
    "ConflictError",
    "InvalidInputError",
    "LedgerUnavailableError",
    "NotActiveError",
    "NotFoundError",
    "NotTargetedError",
    # Logging
    "configure_logging",
    "get_logger",
    "log_execution_time",
    "set_log_level",
    "log_exception",
]
