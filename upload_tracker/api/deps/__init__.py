"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    OWNER_HEADER,
    get_batch_issuance_service,
    get_job_status_service,
    get_owner_id,
    get_s3_upload_client,
    get_service_cache,
    get_upload_item_service,
)

__all__ = [
    "OWNER_HEADER",
    "get_batch_issuance_service",
    "get_job_status_service",
    "get_owner_id",
    "get_s3_upload_client",
    "get_service_cache",
    "get_upload_item_service",
]
