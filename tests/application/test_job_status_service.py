"""
Test suite for JobStatusService.

Covers the polling view, ownership checks and the re-aggregation audit.
"""

import uuid

import pytest
from sqlalchemy import update

from upload_tracker.application.services.job_status_service import JobStatusService
from upload_tracker.application.services.upload_item_service import UploadItemService
from upload_tracker.boundary.db.models.upload_job_model import UploadJobModel
from upload_tracker.core.results import Rejected, RejectionReason
from upload_tracker.core.statuses import ItemStatus, JobStatus
from upload_tracker.models.job import JobStatusResponse


@pytest.fixture
def status_service(test_async_db) -> JobStatusService:
    return JobStatusService(test_async_db)


class TestGetJobStatus:
    """Test suite for JobStatusService.get_job_status()."""

    @pytest.mark.asyncio
    async def test_fresh_job_view(
        self, test_async_db, status_service, issue_batch, owner_id
    ) -> None:
        batch = await issue_batch(test_async_db, owner_id, 2)

        view = await status_service.get_job_status(batch.job_id, owner_id)

        assert isinstance(view, JobStatusResponse)
        assert view.job_id == batch.job_id
        assert (view.total, view.pending) == (2, 2)
        assert view.status is JobStatus.ACTIVE
        assert view.version == 1
        assert [item.item_id for item in view.items] == [i.item_id for i in batch.items]
        assert all(item.status is ItemStatus.PENDING for item in view.items)
        assert view.items[0].content_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_serializes_with_camel_case_keys(
        self, test_async_db, status_service, issue_batch, owner_id
    ) -> None:
        batch = await issue_batch(test_async_db, owner_id, 1)

        view = await status_service.get_job_status(batch.job_id, owner_id)
        body = view.model_dump(mode="json", by_alias=True)

        assert {"jobId", "status", "total", "pending", "inProgress", "done", "failed"} <= body.keys()
        assert set(body["items"][0]) >= {"itemId", "name", "status"}
        assert body["status"] == "active"

    @pytest.mark.asyncio
    async def test_unknown_job(self, status_service, owner_id) -> None:
        result = await status_service.get_job_status(uuid.uuid4(), owner_id)

        assert isinstance(result, Rejected)
        assert result.reason is RejectionReason.NOT_FOUND

    @pytest.mark.asyncio
    async def test_other_owner(
        self, test_async_db, status_service, issue_batch, owner_id, other_owner_id
    ) -> None:
        batch = await issue_batch(test_async_db, owner_id, 1)

        result = await status_service.get_job_status(batch.job_id, other_owner_id)

        assert result.reason is RejectionReason.NOT_OWNER
        assert result.message == f"Job {batch.job_id} not found"


class TestAuditJob:
    """Test suite for JobStatusService.audit_job()."""

    @pytest.mark.asyncio
    async def test_counters_match_items(
        self, test_async_db, status_service, issue_batch, owner_id
    ) -> None:
        batch = await issue_batch(test_async_db, owner_id, 3)
        items = UploadItemService(test_async_db)
        await items.begin_item(batch.items[0].item_id, owner_id)
        await items.fail_item(batch.items[1].item_id, owner_id)

        audit = await status_service.audit_job(batch.job_id, owner_id)

        assert audit.consistent
        assert audit.recounted.in_progress == 1
        assert audit.recounted.failed == 1
        assert audit.recounted.pending == 1

    @pytest.mark.asyncio
    async def test_drift_is_reported_not_repaired(
        self, test_async_db, status_service, issue_batch, owner_id
    ) -> None:
        # Arrange: counters claim a finished item that is still pending
        batch = await issue_batch(test_async_db, owner_id, 2)
        await test_async_db.execute(
            update(UploadJobModel)
            .where(UploadJobModel.id == batch.job_id)
            .values(pending_count=1, done_count=1)
        )
        await test_async_db.commit()

        # Act
        audit = await status_service.audit_job(batch.job_id, owner_id)

        # Assert
        assert not audit.consistent
        assert audit.recorded.done == 1
        assert audit.recounted.done == 0
        view = await status_service.get_job_status(batch.job_id, owner_id)
        assert view.done == 1

    @pytest.mark.asyncio
    async def test_audit_is_owner_scoped(
        self, test_async_db, status_service, issue_batch, owner_id, other_owner_id
    ) -> None:
        batch = await issue_batch(test_async_db, owner_id, 1)

        result = await status_service.audit_job(batch.job_id, other_owner_id)

        assert result.reason is RejectionReason.NOT_OWNER
