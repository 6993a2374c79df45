"""
Batch API endpoints.

Routes: POST /batches

Dependencies: upload_tracker.application.services, upload_tracker.models
System role: Batch issuance HTTP API
"""

from fastapi import APIRouter, Depends, status

from upload_tracker.api.deps import get_batch_issuance_service
from upload_tracker.api.routers.router_utils import handle_upload_errors
from upload_tracker.application.services.batch_issuance_service import BatchIssuanceService
from upload_tracker.models.batch import IssueBatchRequest, IssueBatchResponse
from upload_tracker.models.common import ErrorResponse

router = APIRouter(prefix="/batches", tags=["batches"])


@router.post(
    "",
    response_model=IssueBatchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
@handle_upload_errors
async def issue_batch(
    request: IssueBatchRequest,
    service: BatchIssuanceService = Depends(get_batch_issuance_service),
):
    """
    Issue a batch of uploads.

    Creates the job and one PENDING item per descriptor, then returns a
    presigned PUT URL per item. Clients upload directly to S3 and report
    each item through the /items endpoints.

    Example Request:
        {
            "ownerId": "8b6f4c1e-...",
            "items": [{"name": "IMG_0001.jpg", "size": 204800, "contentType": "image/jpeg"}]
        }

    Raises:
        400: Empty or oversized batch, blank name, non-positive size
        422: Body does not match the schema
    """
    return await service.issue_batch(request.owner_id, request.items)
