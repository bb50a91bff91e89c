"""
Common utilities package for the task manager.

Authentication primitives (bcrypt, JWT) and logging helpers.
"""

from taskmanager.utils.auth import (
    decode_token,
    encode_token,
    get_password_hash,
    verify_password,
)
from taskmanager.utils.logger import PerformanceLogger, log_performance, setup_logger

__all__ = [
    # Authentication utilities
    "decode_token",
    "encode_token",
    "get_password_hash",
    "verify_password",
    # Logging utilities
    "setup_logger",
    "PerformanceLogger",
    "log_performance",
]
