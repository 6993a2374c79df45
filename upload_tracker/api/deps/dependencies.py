"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: upload_tracker.configs, upload_tracker.application, upload_tracker.boundary
System role: DI container for service injection
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from upload_tracker.application.services import (
    BatchIssuanceService,
    JobStatusService,
    UploadItemService,
)
from upload_tracker.boundary.aws.s3_client import S3UploadClient
from upload_tracker.boundary.db import get_async_db
from upload_tracker.configs import get_settings

OWNER_HEADER = "X-Owner-Id"


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._s3_client = None

    @property
    def s3_client(self) -> S3UploadClient:
        """Get cached S3 upload client."""
        if self._s3_client is None:
            settings = get_settings()
            self._s3_client = S3UploadClient(
                bucket=settings.s3_uploads.bucket,
                region=settings.s3_uploads.region,
                endpoint_url=settings.s3_uploads.endpoint_url,
            )
        return self._s3_client

    def clear(self) -> None:
        """Clear all cached instances."""
        self._s3_client = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_owner_id(x_owner_id: UUID = Header(alias=OWNER_HEADER)) -> UUID:
    """
    Resolve the calling identity from the X-Owner-Id header.

    Returns:
        UUID: Owner identity (422 when missing or malformed)
    """
    return x_owner_id


def get_s3_upload_client(
    cache: ServiceCache = Depends(get_service_cache),
) -> S3UploadClient:
    """Get the cached S3 upload client."""
    return cache.s3_client


def get_batch_issuance_service(
    db: AsyncSession = Depends(get_async_db),
    s3_client: S3UploadClient = Depends(get_s3_upload_client),
) -> BatchIssuanceService:
    """
    Get batch issuance service instance.

    Args:
        db: Async database session (injected via Depends)
        s3_client: Cached S3 upload client (injected via Depends)

    Returns:
        BatchIssuanceService: Batch issuance service instance
    """
    return BatchIssuanceService(db=db, s3_client=s3_client)


def get_upload_item_service(db: AsyncSession = Depends(get_async_db)) -> UploadItemService:
    """
    Get upload item service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        UploadItemService: Item command service instance
    """
    return UploadItemService(db=db)


def get_job_status_service(db: AsyncSession = Depends(get_async_db)) -> JobStatusService:
    """
    Get job status service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        JobStatusService: Job status service instance
    """
    return JobStatusService(db=db)
