"""Shared infrastructure: logging setup and error types."""

from emgcoach.core.errors import InvalidInputError
from emgcoach.core.logger import setup_logger

__all__ = [
    "InvalidInputError",
    "setup_logger",
]
