"""
Router utility functions.

Contains helpers extracted from router endpoints to keep them clean.
"""

from upload_tracker.api.routers.router_utils.error_handling import (
    error_response,
    handle_upload_errors,
    rejection_response,
)

__all__ = [
    "error_response",
    "handle_upload_errors",
    "rejection_response",
]
