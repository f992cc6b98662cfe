"""
Centralized logging configuration for TripLog.

Console output goes to stderr so that commands writing a trip document to
stdout stay pipeable; the dated log file gets the detailed format.
"""

import functools
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "triplog"

CONSOLE_FORMAT = '%(levelname)s %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'

# Client libraries that log every request at DEBUG/INFO
NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3")


def setup_logging(log_level: str = "INFO", log_to_file: bool = True, log_dir: str = "logs") -> logging.Logger:
    """
    Configure the ``triplog`` logger tree.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Also write ``<log_dir>/triplog_YYYYMMDD.log``
        log_dir: Directory for dated log files

    Returns:
        The package root logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_to_file:
        log_file = Path(log_dir) / f"triplog_{datetime.now().strftime('%Y%m%d')}.log"
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        except OSError as e:
            logger.warning(f"Could not set up file logging in {log_dir}: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            logger.addHandler(file_handler)
            logger.debug(f"Logging to file: {log_file}")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger under the ``triplog`` tree.

    Package modules pass ``__name__`` (already ``triplog.*``); any other name
    is nested under the root.
    """
    if name is None or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_function_entry(logger: logging.Logger, func_name: str, **kwargs):
    if not logger.isEnabledFor(logging.DEBUG):
        return
    params = ", ".join(f"{k}={v!r}" for k, v in kwargs.items())
    logger.debug(f"-> {func_name}({params})")


def log_function_exit(logger: logging.Logger, func_name: str, result=None):
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(f"<- {func_name}" + (f": {result}" if result is not None else ""))


def log_error(logger: logging.Logger, error: Exception, context: Optional[str] = None):
    """
    Log an exception with its traceback.

    Args:
        logger: Logger instance
        error: The exception being reported
        context: Where it happened, prefixed to the message
    """
    message = f"{type(error).__name__}: {error}"
    logger.error(f"{context} - {message}" if context else message, exc_info=error)


def log_performance(logger: logging.Logger, operation: str, duration: float, details: Optional[str] = None):
    suffix = f" ({details})" if details else ""
    logger.info(f"{operation} finished in {duration:.3f}s{suffix}")


def log_execution_time(logger: Optional[logging.Logger] = None):
    """Decorator that logs how long the wrapped call took, and logs failures before re-raising."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            func_logger = logger or get_logger(func.__module__)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log_performance(func_logger, f"{func.__name__} (failed)", time.perf_counter() - start)
                log_error(func_logger, e, func.__name__)
                raise
            log_performance(func_logger, func.__name__, time.perf_counter() - start)
            return result

        return wrapper
    return decorator
