"""
Test suite for UploadItemCRUD against a real (SQLite) database.

Focus: the conditional status update and the per-status recount.
"""

import uuid

import pytest
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from upload_tracker.boundary.db.CRUD.upload_item_crud import upload_item_crud
from upload_tracker.boundary.db.CRUD.upload_job_crud import upload_job_crud
from upload_tracker.boundary.db.models.upload_item_model import UploadItemModel
from upload_tracker.core.item_state_machine import ItemAction, plan_transition
from upload_tracker.core.statuses import ItemStatus

BEGIN_PLAN = plan_transition(ItemStatus.PENDING, ItemAction.BEGIN)
FAIL_PENDING_PLAN = plan_transition(ItemStatus.PENDING, ItemAction.FAIL)


@pytest.fixture
async def job_with_items(test_async_db: AsyncSession):
    """Persist a job with three pending items; returns (job, items)."""
    job_id, owner_id = uuid.uuid4(), uuid.uuid4()
    job = await upload_job_crud.create_job(test_async_db, job_id, owner_id, 3)
    items = await upload_item_crud.create_many(
        test_async_db,
        [
            {
                "job_id": job_id,
                "owner_id": owner_id,
                "position": position,
                "name": f"file-{position}.bin",
                "size_bytes": 10,
                "content_type": "application/octet-stream",
                "storage_bucket": "bucket",
                "storage_key": f"uploads/{job_id}/{position}",
            }
            for position in (2, 0, 1)
        ],
    )
    await test_async_db.commit()
    return job, items


class TestTransition:
    """Test suite for UploadItemCRUD.transition()."""

    @pytest.mark.asyncio
    async def test_matching_status_updates_row(self, test_async_db, job_with_items) -> None:
        _, items = job_with_items

        updated = await upload_item_crud.transition(
            test_async_db, items[0].id, BEGIN_PLAN
        )

        assert updated is not None
        assert updated.status is ItemStatus.IN_PROGRESS
        assert updated.started_at is not None
        assert updated.ended_at is None

    @pytest.mark.asyncio
    async def test_stale_expected_status_changes_nothing(
        self, test_async_db, job_with_items
    ) -> None:
        _, items = job_with_items
        await upload_item_crud.transition(
            test_async_db, items[0].id, BEGIN_PLAN
        )

        second = await upload_item_crud.transition(
            test_async_db, items[0].id, BEGIN_PLAN
        )

        assert second is None

    @pytest.mark.asyncio
    async def test_terminal_status_sets_ended_at(self, test_async_db, job_with_items) -> None:
        _, items = job_with_items

        updated = await upload_item_crud.transition(
            test_async_db, items[1].id, FAIL_PENDING_PLAN
        )

        assert updated.status is ItemStatus.FAILED
        assert updated.ended_at is not None
        assert updated.started_at is None


class TestQueries:
    """Test suite for listing and recounting items."""

    @pytest.mark.asyncio
    async def test_list_by_job_follows_batch_position(self, test_async_db, job_with_items) -> None:
        job, _ = job_with_items

        listed = await upload_item_crud.list_by_job(test_async_db, job.id)

        assert [item.position for item in listed] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_count_by_status(self, test_async_db, job_with_items) -> None:
        job, items = job_with_items
        await upload_item_crud.transition(
            test_async_db, items[0].id, FAIL_PENDING_PLAN
        )

        counts = await upload_item_crud.count_by_status(test_async_db, job.id)

        assert counts == {ItemStatus.PENDING: 2, ItemStatus.FAILED: 1}

    @pytest.mark.asyncio
    async def test_fresh_read_replaces_stale_instance(self, test_async_db, job_with_items) -> None:
        _, items = job_with_items
        item = await upload_item_crud.get_by_id(test_async_db, items[0].id)
        await test_async_db.execute(
            update(UploadItemModel)
            .where(UploadItemModel.id == item.id)
            .values(status=ItemStatus.FAILED)
            .execution_options(synchronize_session=False)
        )

        cached = await upload_item_crud.get_by_id(test_async_db, item.id)
        assert cached.status is ItemStatus.PENDING

        fresh = await upload_item_crud.get_by_id(test_async_db, item.id, fresh=True)
        assert fresh is item
        assert fresh.status is ItemStatus.FAILED
