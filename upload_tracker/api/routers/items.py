"""
Item API endpoints.

Routes: PUT /items/{item_id}/begin, PUT /items/{item_id}/complete,
        PUT /items/{item_id}/fail

Dependencies: upload_tracker.application.services, upload_tracker.models
System role: Item lifecycle HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from upload_tracker.api.deps import get_owner_id, get_upload_item_service
from upload_tracker.api.routers.router_utils import handle_upload_errors, rejection_response
from upload_tracker.application.services.upload_item_service import UploadItemService
from upload_tracker.core.results import Rejected, TransitionResult
from upload_tracker.models.common import ErrorResponse
from upload_tracker.models.item import ItemTransitionResponse

router = APIRouter(prefix="/items", tags=["items"])

_ERRORS = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _respond(result: TransitionResult):
    if isinstance(result, Rejected):
        return rejection_response(result)
    return ItemTransitionResponse.from_result(result)


@router.put("/{item_id}/begin", response_model=ItemTransitionResponse, responses=_ERRORS)
@handle_upload_errors
async def begin_item(
    item_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    service: UploadItemService = Depends(get_upload_item_service),
):
    """Report that the client started uploading the item (PENDING -> IN_PROGRESS)."""
    return _respond(await service.begin_item(item_id, owner_id))


@router.put("/{item_id}/complete", response_model=ItemTransitionResponse, responses=_ERRORS)
@handle_upload_errors
async def complete_item(
    item_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    service: UploadItemService = Depends(get_upload_item_service),
):
    """Report a finished upload (IN_PROGRESS -> DONE)."""
    return _respond(await service.complete_item(item_id, owner_id))


@router.put("/{item_id}/fail", response_model=ItemTransitionResponse, responses=_ERRORS)
@handle_upload_errors
async def fail_item(
    item_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    service: UploadItemService = Depends(get_upload_item_service),
):
    """
    Report a failed or abandoned upload (PENDING or IN_PROGRESS -> FAILED).

    Failing a stuck PENDING item is how a client settles a job whose item
    never got a usable write URL.
    """
    return _respond(await service.fail_item(item_id, owner_id))
