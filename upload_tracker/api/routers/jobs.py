"""
Job API endpoints.

Routes: GET /jobs/{job_id}/status, GET /jobs/{job_id}/audit

Dependencies: upload_tracker.application.services, upload_tracker.models
System role: Job status HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from upload_tracker.api.deps import get_job_status_service, get_owner_id
from upload_tracker.api.routers.router_utils import handle_upload_errors, rejection_response
from upload_tracker.application.services.job_status_service import JobStatusService
from upload_tracker.core.results import Rejected
from upload_tracker.models.common import ErrorResponse
from upload_tracker.models.job import JobAuditResponse, JobStatusResponse

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get(
    "/{job_id}/status",
    response_model=JobStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
@handle_upload_errors
async def get_job_status(
    job_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    service: JobStatusService = Depends(get_job_status_service),
):
    """
    Get job counters, status and item statuses for client polling.

    Clients poll every few seconds until status is completed or
    partially_failed. Read-only.

    Example Response:
        {
            "jobId": "123e4567-e89b-12d3-a456-426614174000",
            "status": "active",
            "total": 3, "pending": 2, "inProgress": 0, "done": 1, "failed": 0,
            "version": 3,
            "createdAt": "2025-01-01T12:00:00Z",
            "endedAt": null,
            "items": [{"itemId": "...", "name": "a.jpg", "status": "done", ...}]
        }
    """
    result = await service.get_job_status(job_id, owner_id)
    if isinstance(result, Rejected):
        return rejection_response(result)
    return result


@router.get(
    "/{job_id}/audit",
    response_model=JobAuditResponse,
    responses={404: {"model": ErrorResponse}},
)
@handle_upload_errors
async def audit_job(
    job_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    service: JobStatusService = Depends(get_job_status_service),
):
    """Recount item statuses and compare them with the job counters (read-only)."""
    result = await service.audit_job(job_id, owner_id)
    if isinstance(result, Rejected):
        return rejection_response(result)
    return result
