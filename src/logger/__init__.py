"""Logging utilities for the content sync project."""

from .logging_decorator import (
    DEFAULT_LOGGER_NAME,
    DEFAULT_LOG_FILE,
    setup_logging,
    log_function,
)

__all__ = ["DEFAULT_LOGGER_NAME", "DEFAULT_LOG_FILE", "setup_logging", "log_function"]
