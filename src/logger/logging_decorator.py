"""
Centralized Logging Utilities and Decorators

Provides reusable logging setup and function decorators for consistent logging
across the content sync project.

stdout is reserved for the machine-readable run report, so console output
always goes to stderr.

Usage:
    from src.logger import setup_logging, log_function

    # Setup logging for a module
    logger = setup_logging(
        logger_name="content_sync",
        log_file="logs/content_sync.log",
        verbose=True
    )

    # Decorate functions for automatic logging
    @log_function(logger_name="content_sync", log_execution_time=True)
    def build_document(item, config):
        ...
"""

import functools
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Callable, Any


DEFAULT_LOGGER_NAME = "content_sync"
DEFAULT_LOG_FILE = "logs/content_sync.log"


def setup_logging(
    logger_name: str = DEFAULT_LOGGER_NAME,
    log_file: Optional[str] = DEFAULT_LOG_FILE,
    verbose: bool = False,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Set up logging with an optional file handler and a stderr console handler.

    Args:
        logger_name: Name for the logger (default: "content_sync")
        log_file: Path to log file, or None to skip file logging
        verbose: If True, console handler logs at DEBUG level (default: False)
        level: Base logging level (default: logging.INFO)

    Returns:
        Configured logger instance

    Example:
        logger = setup_logging("content_sync", "logs/content_sync.log", verbose=True)
        logger.info("Sync started")
    """
    logger = logging.getLogger(logger_name)

    # Avoid adding multiple handlers if already configured
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if verbose else level)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    # Warnings and errors always reach the console, everything in verbose mode
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    return logger


def log_function(
    logger_name: Optional[str] = None,
    level: int = logging.DEBUG,
    log_args: bool = False,
    log_result: bool = False,
    log_execution_time: bool = True,
) -> Callable:
    """
    Decorator to automatically log function entry, exit, execution time, and exceptions.

    Args:
        logger_name: Custom logger name (if None, uses the decorated function's module name)
        level: Log level for entry/exit messages (default: logging.DEBUG)
        log_args: If True, log function arguments (default: False)
        log_result: If True, log return value (default: False)
        log_execution_time: If True, log execution duration (default: True)

    Returns:
        Decorated function with logging

    Example:
        @log_function(logger_name="content_sync", log_args=True)
        def download_asset(url, destination):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            logger = logging.getLogger(logger_name or func.__module__)

            func_name = func.__qualname__
            log_msg = f"Calling {func_name}"

            if log_args and (args or kwargs):
                args_repr = [repr(a) for a in args]
                kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
                log_msg += f" with args: {', '.join(args_repr + kwargs_repr)}"

            logger.log(level, log_msg)

            start_time = time.monotonic()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = time.monotonic() - start_time
                logger.error(
                    f"Exception in {func_name} after {execution_time:.2f}s: {type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise

            completion_msg = f"Completed {func_name}"
            if log_execution_time:
                completion_msg += f" in {time.monotonic() - start_time:.2f}s"
            if log_result:
                completion_msg += f" with result: {result!r}"
            logger.log(level, completion_msg)

            return result

        return wrapper

    return decorator
