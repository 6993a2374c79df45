"""
Batch issuance service.

Creates a job and its items in one transaction, then asks the object store
for one write permission per item. A signing failure for one item is
reported on that item only; the batch is never rolled back for it.

Dependencies: upload_tracker.boundary.db.CRUD, upload_tracker.boundary.aws,
              upload_tracker.core
System role: Batch issuance orchestration
"""

import logging
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from upload_tracker.boundary.aws.s3_client import S3UploadClient
from upload_tracker.boundary.db.CRUD.upload_item_crud import upload_item_crud
from upload_tracker.boundary.db.CRUD.upload_job_crud import upload_job_crud
from upload_tracker.boundary.db.models.upload_item_model import UploadItemModel
from upload_tracker.configs import Settings, get_settings
from upload_tracker.core.exceptions import InvalidRequestError, WritePermissionError
from upload_tracker.core.statuses import ItemStatus, JobStatus
from upload_tracker.core.storage_keys import build_storage_key
from upload_tracker.models.batch import (
    BatchItemRequest,
    IssueBatchResponse,
    IssuedItemResponse,
)

logger = logging.getLogger(__name__)


class BatchIssuanceService:
    """
    Batch issuance orchestrator.

    Validates descriptors, persists the job with every item PENDING, and
    attaches a presigned write URL to each item.
    """

    def __init__(
        self,
        db: AsyncSession,
        s3_client: S3UploadClient,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize batch issuance service.

        Args:
            db: AsyncSession for job and item persistence
            s3_client: Object-store client issuing write permissions
            settings: Optional settings (defaults to get_settings())
        """
        self.db = db
        self.s3_client = s3_client
        self.settings = settings or get_settings()

    def validate_items(self, items: list[BatchItemRequest]) -> None:
        """
        Reject a malformed batch before anything is written.

        Args:
            items: Item descriptors from the request

        Raises:
            InvalidRequestError: On an empty or oversized batch, a blank or
                overlong name, a non-positive size, or a content type
                outside the configured allow list
        """
        limits = self.settings.uploads

        if not items:
            raise InvalidRequestError("A batch needs at least one item", field="items")
        if len(items) > limits.max_items_per_batch:
            raise InvalidRequestError(
                f"A batch accepts at most {limits.max_items_per_batch} items",
                field="items",
                details={"count": len(items)},
            )

        allowed = {ct.lower() for ct in limits.allowed_content_types}
        for index, item in enumerate(items):
            if not item.name.strip():
                raise InvalidRequestError("Item name must not be empty", field=f"items[{index}].name")
            if len(item.name) > limits.max_name_length:
                raise InvalidRequestError(
                    f"Item name exceeds {limits.max_name_length} characters",
                    field=f"items[{index}].name",
                )
            if item.size <= 0:
                raise InvalidRequestError("Item size must be positive", field=f"items[{index}].size")
            if allowed and item.content_type.lower() not in allowed:
                raise InvalidRequestError(
                    f"Content type {item.content_type} is not accepted",
                    field=f"items[{index}].contentType",
                )

    async def issue_batch(
        self,
        owner_id: UUID,
        items: list[BatchItemRequest],
    ) -> IssueBatchResponse:
        """
        Issue a batch of uploads.

        Steps:
        1. Validate descriptors
        2. Insert the job (counters {N, 0, 0, 0}, ACTIVE) and N PENDING items
           in a single transaction
        3. Sign one write URL per item; failures stay local to the item

        Args:
            owner_id: Identity issuing the batch
            items: Item descriptors, in order

        Returns:
            IssueBatchResponse: Job id plus per-item write permissions

        Raises:
            InvalidRequestError: If the batch is malformed
            SQLAlchemyError: If the batch cannot be persisted
        """
        self.validate_items(items)

        job_id = uuid4()
        bucket = self.s3_client.bucket
        rows = []
        for position, item in enumerate(items):
            item_id = uuid4()
            rows.append(
                {
                    "id": item_id,
                    "job_id": job_id,
                    "owner_id": owner_id,
                    "position": position,
                    "name": item.name,
                    "size_bytes": item.size,
                    "content_type": item.content_type,
                    "storage_bucket": bucket,
                    "storage_key": build_storage_key(
                        self.settings.s3_uploads.key_prefix, job_id, item_id, item.name
                    ),
                    "status": ItemStatus.PENDING,
                }
            )

        try:
            await upload_job_crud.create_job(self.db, job_id, owner_id, len(rows))
            created = await upload_item_crud.create_many(self.db, rows)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Failed to persist batch",
                extra={"job_id": str(job_id), "owner_id": str(owner_id), "error": str(e)},
            )
            raise

        issued = [self._issue_permission(item) for item in created]
        unsigned = sum(1 for entry in issued if entry.write_url is None)

        logger.info(
            "Batch issued",
            extra={
                "job_id": str(job_id),
                "owner_id": str(owner_id),
                "total": len(issued),
                "unsigned": unsigned,
            },
        )
        return IssueBatchResponse(
            job_id=job_id,
            status=JobStatus.ACTIVE,
            total=len(issued),
            items=issued,
        )

    def _issue_permission(self, item: UploadItemModel) -> IssuedItemResponse:
        try:
            url, expires_at = self.s3_client.issue_write_permission(
                item.storage_key,
                content_type=item.content_type,
                expires_in=self.settings.s3_uploads.presigned_url_expiry,
            )
        except WritePermissionError as e:
            logger.warning(
                "Write permission not issued",
                extra={
                    "job_id": str(item.job_id),
                    "item_id": str(item.id),
                    "storage_key": item.storage_key,
                    "error": e.message,
                },
            )
            return IssuedItemResponse(
                item_id=item.id,
                name=item.name,
                storage_key=item.storage_key,
                error=e.message,
            )

        return IssuedItemResponse(
            item_id=item.id,
            name=item.name,
            storage_key=item.storage_key,
            write_url=url,
            expires_at=expires_at,
        )
