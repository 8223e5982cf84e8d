"""
Utility modules for Pushline.

This package provides common utilities:
- logger: Structured logging
- environment: Required environment variables
"""

from pushline.utils.logger import (
    get_logger,
    setup_logging,
    LogLevel,
)
from pushline.utils.environment import read_docker_host

__all__ = [
    "get_logger",
    "setup_logging",
    "LogLevel",
    "read_docker_host",
]
