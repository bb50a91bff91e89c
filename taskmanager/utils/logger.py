"""
Logging utilities with size-based file rotation and timing helpers.

Key Features:
    - One log file per process run, grouped in date directories
    - Size-based rotation that survives file permission errors
    - Timing context manager / decorator for storage calls
    - Automatic cleanup of log directories older than a week
"""

import datetime
import logging
import os
import sys
import time
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))

LOG_FILE_BASENAME = "taskmanager"

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Log rotation settings
MAX_LOG_SIZE_MB = 5
MAX_LOG_SIZE_BYTES = MAX_LOG_SIZE_MB * 1024 * 1024
MAX_BACKUP_COUNT = 10

# Operations slower than this are logged at WARNING by PerformanceLogger
SLOW_OPERATION_SECONDS = 1.0

# All loggers of one process share a single log file
_GLOBAL_LOG_FILE: Path | None = None


def _get_log_file() -> Path:
    global _GLOBAL_LOG_FILE
    if _GLOBAL_LOG_FILE is None:
        now = datetime.datetime.now()
        date_dir = LOG_DIR / now.strftime("%Y-%m-%d")
        date_dir.mkdir(parents=True, exist_ok=True)
        run_timestamp = now.strftime("%Y-%m-%d_%H-%M-%S")
        _GLOBAL_LOG_FILE = date_dir / f"{LOG_FILE_BASENAME}_{run_timestamp}.log"
    return _GLOBAL_LOG_FILE


class SafeRotatingFileHandler(RotatingFileHandler):
    """Size-based rotation handler that keeps writing when rollover fails."""

    def doRollover(self):
        try:
            super().doRollover()
        except (OSError, PermissionError) as e:
            # The logger itself cannot be used from inside its own handler
            sys.stderr.write(
                f"Log rotation failed: {e}. Continuing with current log file.\n"
            )
            sys.stderr.flush()


def _get_log_level(level_str: str) -> int:
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_str.upper(), logging.INFO)


def setup_logger(name: str, level: str = None) -> logging.Logger:
    """Set up logger with both console and file handlers."""
    logger = logging.getLogger(name)

    log_level = _get_log_level(level or DEFAULT_LOG_LEVEL)
    logger.setLevel(log_level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    try:
        file_handler = SafeRotatingFileHandler(
            _get_log_file(),
            maxBytes=MAX_LOG_SIZE_BYTES,
            backupCount=MAX_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        # Read-only filesystems still get console logging
        logger.warning(f"File logging disabled: {e}")
    else:
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(file_handler)
        cleanup_old_logs(keep_days=7)

    return logger


def cleanup_old_logs(keep_days: int = 7) -> int:
    """Delete date directories older than ``keep_days``. Returns files removed."""
    cutoff_time = datetime.datetime.now() - datetime.timedelta(days=keep_days)
    deleted_count = 0

    for date_dir in LOG_DIR.iterdir():
        if not date_dir.is_dir():
            continue
        try:
            dir_date = datetime.datetime.strptime(date_dir.name, "%Y-%m-%d")
        except ValueError:
            # Not one of ours
            continue
        if dir_date >= cutoff_time:
            continue

        for log_file in date_dir.iterdir():
            try:
                log_file.unlink()
                deleted_count += 1
            except (PermissionError, FileNotFoundError):
                continue
        try:
            date_dir.rmdir()
        except OSError:
            # Directory may not be empty due to failed deletions
            continue

    return deleted_count


class PerformanceLogger:
    """
    Context manager that logs how long a block took.

    Usage:
        with PerformanceLogger(logger, "query tasks"):
            ...
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        slow_threshold: float = SLOW_OPERATION_SECONDS,
    ):
        self.logger = logger
        self.operation = operation
        self.slow_threshold = slow_threshold
        self.start_time = None
        self.elapsed = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self.start_time
        if exc_type is not None:
            self.logger.debug(
                f"{self.operation} failed after {self.elapsed:.3f}s: {exc_val}"
            )
        elif self.elapsed > self.slow_threshold:
            self.logger.warning(f"{self.operation} was slow: {self.elapsed:.3f}s")
        else:
            self.logger.debug(f"{self.operation} took {self.elapsed:.3f}s")
        return False


def log_performance(logger: logging.Logger, operation: str | None = None):
    """Decorator form of PerformanceLogger for async functions."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            with PerformanceLogger(logger, operation or func.__qualname__):
                return await func(*args, **kwargs)

        return wrapper

    return decorator
