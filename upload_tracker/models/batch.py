"""
Batch issuance schemas.

Request/response schemas for POST /batches.

Dependencies: pydantic
System role: Batch issuance API contracts
"""

import uuid
from datetime import datetime

from pydantic import Field

from upload_tracker.core.statuses import JobStatus
from upload_tracker.models.common import CamelModel


class BatchItemRequest(CamelModel):
    """One item descriptor. Business limits are checked by the issuance service."""

    name: str = Field(description="Client-side item name (e.g. original filename)")
    size: int = Field(description="Declared size in bytes")
    content_type: str = Field(
        default="application/octet-stream",
        description="MIME type the upload will declare",
    )


class IssueBatchRequest(CamelModel):
    """Request schema for issuing a batch."""

    owner_id: uuid.UUID = Field(description="Identity issuing and driving the batch")
    items: list[BatchItemRequest] = Field(description="Item descriptors, in order")


class IssuedItemResponse(CamelModel):
    """One created item with its write permission."""

    item_id: uuid.UUID
    name: str
    storage_key: str = Field(description="Object key the upload must target")
    write_url: str | None = Field(
        default=None,
        description="Presigned PUT URL; null when signing failed",
    )
    expires_at: datetime | None = None
    error: str | None = Field(default=None, description="Why no write URL was issued")


class IssueBatchResponse(CamelModel):
    """Response schema for an issued batch."""

    job_id: uuid.UUID
    status: JobStatus
    total: int
    items: list[IssuedItemResponse]
