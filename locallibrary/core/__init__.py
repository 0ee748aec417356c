"""Core utilities."""
from locallibrary.core.exceptions import AppException, NotFoundError, StoreError
from locallibrary.core.logging import get_logger, setup_logging

__all__ = [
    # Exceptions
    "AppException",
    "NotFoundError",
    "StoreError",
    # Logging
    "get_logger",
    "setup_logging",
]
