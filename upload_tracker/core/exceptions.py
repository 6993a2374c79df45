"""
Exception hierarchy for the upload tracker.

Only conditions that abort a request are raised. Expected outcomes of an
item transition (not found, not owner, invalid transition) are returned as
values, see upload_tracker.core.results.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class UploadTrackerError(Exception):
    """Base exception for all upload tracker errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidRequestError(UploadTrackerError):
    """Raised when a batch request is malformed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid request error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ContentionError(UploadTrackerError):
    """Raised when a transition keeps losing write conflicts past the retry budget."""

    def __init__(
        self,
        item_id: str,
        attempts: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"item_id": item_id, "attempts": attempts})
        super().__init__(
            f"Gave up on item {item_id} after {attempts} conflicting attempts", details
        )


class WritePermissionError(UploadTrackerError):
    """Raised when the object store cannot sign a write permission."""

    def __init__(
        self,
        message: str,
        storage_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if storage_key:
            details["storage_key"] = storage_key
        super().__init__(message, details)


class AggregationError(UploadTrackerError):
    """Raised when the job row refuses a delta for a non-terminal job (counter underflow)."""

    def __init__(
        self,
        message: str,
        job_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if job_id:
            details["job_id"] = job_id
        super().__init__(message, details)
