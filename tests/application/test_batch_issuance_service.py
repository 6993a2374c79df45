"""
Test suite for BatchIssuanceService.

Covers persistence of the job and its items, per-item write permissions,
and request validation.
"""

import pytest
from sqlalchemy import func, select

from upload_tracker.application.services.batch_issuance_service import BatchIssuanceService
from upload_tracker.boundary.db.CRUD.upload_item_crud import upload_item_crud
from upload_tracker.boundary.db.CRUD.upload_job_crud import upload_job_crud
from upload_tracker.boundary.db.models.upload_job_model import UploadJobModel
from upload_tracker.configs import Settings
from upload_tracker.configs.uploads import UploadSettings
from upload_tracker.core.exceptions import InvalidRequestError, WritePermissionError
from upload_tracker.core.statuses import ItemStatus, JobStatus
from upload_tracker.models.batch import BatchItemRequest


def _items(*names: str) -> list[BatchItemRequest]:
    return [BatchItemRequest(name=name, size=100, content_type="image/jpeg") for name in names]


class TestIssueBatch:
    """Test suite for BatchIssuanceService.issue_batch()."""

    @pytest.mark.asyncio
    async def test_creates_active_job_with_pending_items(
        self, test_async_db, fake_s3_client, owner_id
    ) -> None:
        # Arrange
        service = BatchIssuanceService(test_async_db, fake_s3_client, settings=Settings())

        # Act
        response = await service.issue_batch(owner_id, _items("a.jpg", "b.jpg", "c.jpg"))

        # Assert
        assert response.total == 3
        assert response.status is JobStatus.ACTIVE

        job = await upload_job_crud.get_by_id(test_async_db, response.job_id)
        assert job.owner_id == owner_id
        assert job.counters.pending_count == 3
        assert job.status is JobStatus.ACTIVE

        items = await upload_item_crud.list_by_job(test_async_db, response.job_id)
        assert [item.name for item in items] == ["a.jpg", "b.jpg", "c.jpg"]
        assert all(item.status is ItemStatus.PENDING for item in items)
        assert all(item.storage_bucket == fake_s3_client.bucket for item in items)

    @pytest.mark.asyncio
    async def test_every_item_gets_a_distinct_write_url(
        self, test_async_db, fake_s3_client, owner_id
    ) -> None:
        service = BatchIssuanceService(test_async_db, fake_s3_client, settings=Settings())

        response = await service.issue_batch(owner_id, _items("same.jpg", "same.jpg"))

        keys = [item.storage_key for item in response.items]
        assert len(set(keys)) == 2
        for item in response.items:
            assert item.storage_key.startswith(f"uploads/{response.job_id}/{item.item_id}-")
            assert item.write_url and item.storage_key in item.write_url
            assert item.expires_at is not None
            assert item.error is None
        assert fake_s3_client.issue_write_permission.call_count == 2

    @pytest.mark.asyncio
    async def test_signing_failure_is_reported_per_item(
        self, test_async_db, fake_s3_client, owner_id
    ) -> None:
        # Arrange: the second signature fails
        signer = fake_s3_client.issue_write_permission.side_effect
        calls = {"n": 0}

        def _flaky(storage_key, content_type="application/octet-stream", expires_in=3600):
            calls["n"] += 1
            if calls["n"] == 2:
                raise WritePermissionError("Failed to sign upload URL", storage_key=storage_key)
            return signer(storage_key, content_type, expires_in)

        fake_s3_client.issue_write_permission.side_effect = _flaky
        service = BatchIssuanceService(test_async_db, fake_s3_client, settings=Settings())

        # Act
        response = await service.issue_batch(owner_id, _items("a", "b", "c"))

        # Assert: batch kept, only item b lacks a URL
        assert [item.write_url is None for item in response.items] == [False, True, False]
        assert response.items[1].error == "Failed to sign upload URL"
        job = await upload_job_crud.get_by_id(test_async_db, response.job_id)
        assert job.total_items == 3


class TestValidation:
    """Test suite for batch validation."""

    @pytest.fixture
    def service(self, test_async_db, fake_s3_client) -> BatchIssuanceService:
        settings = Settings(
            uploads=UploadSettings(
                max_items_per_batch=3,
                max_name_length=20,
                allowed_content_types=["image/jpeg", "image/png"],
            )
        )
        return BatchIssuanceService(test_async_db, fake_s3_client, settings=settings)

    @pytest.mark.parametrize(
        "items, field",
        [
            ([], "items"),
            ([BatchItemRequest(name="x", size=1)] * 4, "items"),
            ([BatchItemRequest(name="   ", size=1, content_type="image/png")], "items[0].name"),
            ([BatchItemRequest(name="x" * 21, size=1, content_type="image/png")], "items[0].name"),
            (
                [
                    BatchItemRequest(name="ok", size=1, content_type="image/png"),
                    BatchItemRequest(name="zero", size=0, content_type="image/png"),
                ],
                "items[1].size",
            ),
            ([BatchItemRequest(name="x", size=-5, content_type="image/png")], "items[0].size"),
            ([BatchItemRequest(name="x", size=1, content_type="text/html")], "items[0].contentType"),
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_batch_rejected_before_any_write(
        self, service, test_async_db, fake_s3_client, owner_id, items, field
    ) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            await service.issue_batch(owner_id, items)

        assert exc_info.value.details["field"] == field
        job_count = await test_async_db.scalar(select(func.count()).select_from(UploadJobModel))
        assert job_count == 0
        fake_s3_client.issue_write_permission.assert_not_called()

    @pytest.mark.asyncio
    async def test_content_type_match_is_case_insensitive(self, service, owner_id) -> None:
        response = await service.issue_batch(
            owner_id, [BatchItemRequest(name="x", size=1, content_type="IMAGE/PNG")]
        )

        assert response.total == 1


def test_default_batch_limit_is_500() -> None:
    assert UploadSettings().max_items_per_batch == 500
