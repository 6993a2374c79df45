"""
Upload error handling utilities.

Translates service outcomes into HTTP responses in one place:

    Rejected NOT_FOUND          -> 404
    Rejected NOT_OWNER          -> 404 (same body as NOT_FOUND)
    Rejected INVALID_TRANSITION -> 409
    InvalidRequestError         -> 400
    ContentionError             -> 503
    anything else               -> 500

Every error body is {"error": <kind>, "detail": <message>}.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from upload_tracker.core.exceptions import (
    ContentionError,
    InvalidRequestError,
    UploadTrackerError,
)
from upload_tracker.core.results import Rejected, RejectionReason
from upload_tracker.models.common import ErrorResponse

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

_REJECTION_STATUS = {
    RejectionReason.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "not_found"),
    # Non-owners must not learn that the resource exists
    RejectionReason.NOT_OWNER: (status.HTTP_404_NOT_FOUND, "not_found"),
    RejectionReason.INVALID_TRANSITION: (status.HTTP_409_CONFLICT, "invalid_transition"),
}


def error_response(status_code: int, error: str, detail: Any) -> JSONResponse:
    """Build a JSON error response with the shared body shape."""
    body = ErrorResponse(error=error, detail=detail)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def rejection_response(rejected: Rejected) -> JSONResponse:
    """Translate a Rejected result into its HTTP response."""
    status_code, error = _REJECTION_STATUS[rejected.reason]
    return error_response(status_code, error, rejected.message)


def handle_upload_errors(func: F) -> F:
    """
    Decorator to turn raised upload errors into JSON error responses.

    This centralizes:
    - Logging of errors with their details
    - Mapping specific exceptions to HTTP status codes
    - Ensuring uniform error response formats
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except InvalidRequestError as e:
            logger.warning("Invalid upload request", extra={"error": e.message, **e.details})
            return error_response(status.HTTP_400_BAD_REQUEST, "invalid_request", e.message)

        except ContentionError as e:
            # Already logged at ERROR by the service
            return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "contention", e.message)

        except UploadTrackerError as e:
            logger.error("Upload operation failed", extra={"error": e.message, **e.details})
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "internal_error",
                "An internal error occurred",
            )

        except Exception as e:
            logger.exception("Unexpected failure in upload operation", extra={"error": str(e)})
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "internal_error",
                "An internal error occurred",
            )

    return wrapper  # type: ignore
