"""Service orchestrators."""

from .batch_issuance_service import BatchIssuanceService
from .job_status_service import JobStatusService
from .upload_item_service import UploadItemService

__all__ = [
    "BatchIssuanceService",
    "JobStatusService",
    "UploadItemService",
]
