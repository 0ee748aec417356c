"""Custom exceptions for the application."""
from typing import Any, Optional


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Resource not found errors."""

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            f"{resource} not found",
            error_code="NOT_FOUND",
            details={"resource": resource, "id": resource_id},
        )


class StoreError(AppException):
    """Persistence layer errors (connectivity, constraint violations)."""

    def __init__(self, operation: str, message: str):
        super().__init__(
            f"Store {operation} failed: {message}",
            error_code="STORE_ERROR",
            details={"operation": operation},
        )
