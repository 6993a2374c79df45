"""
Upload item CRUD operations.

The transition method is the item-level atomicity primitive: a single
UPDATE ... WHERE status = <expected> that reports whether exactly one row
changed. Two callers racing on the same item cannot both win.

Dependencies: sqlalchemy, upload_tracker.boundary.db.models
System role: Item persistence and conditional state updates
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from upload_tracker.boundary.db.base import utcnow
from upload_tracker.boundary.db.CRUD.base_crud import BaseCRUD
from upload_tracker.boundary.db.models.upload_item_model import UploadItemModel
from upload_tracker.core.item_state_machine import TransitionPlan
from upload_tracker.core.statuses import ItemStatus


class UploadItemCRUD(BaseCRUD[UploadItemModel]):
    """CRUD operations for UploadItemModel."""

    def __init__(self) -> None:
        """Initialize UploadItemCRUD with UploadItemModel."""
        super().__init__(UploadItemModel)

    async def list_by_job(
        self,
        session: AsyncSession,
        job_id: UUID,
    ) -> Sequence[UploadItemModel]:
        """
        Retrieve every item of a job in issuance order.

        Args:
            session: Async database session
            job_id: Parent job UUID

        Returns:
            Sequence of UploadItemModels
        """
        stmt = (
            select(UploadItemModel)
            .where(UploadItemModel.job_id == job_id)
            .order_by(UploadItemModel.position)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def transition(
        self,
        session: AsyncSession,
        item_id: UUID,
        plan: TransitionPlan,
        at: datetime | None = None,
    ) -> UploadItemModel | None:
        """
        Apply ``plan`` only if the item is still in ``plan.from_status``.

        Args:
            session: Async database session
            item_id: Item UUID
            plan: Move decided from the status the caller observed
            at: Transition timestamp (defaults to now, UTC); also written to
                started_at and/or ended_at as the plan requires

        Returns:
            The updated item, or None when the item no longer has
            ``plan.from_status`` (or does not exist)
        """
        at = at or utcnow()
        values: dict = {"status": plan.to_status, "updated_at": at}
        if plan.sets_started_at:
            values["started_at"] = at
        if plan.sets_ended_at:
            values["ended_at"] = at

        stmt = (
            update(UploadItemModel)
            .where(
                UploadItemModel.id == item_id,
                UploadItemModel.status == plan.from_status,
            )
            .values(**values)
            .returning(UploadItemModel)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_status(
        self,
        session: AsyncSession,
        job_id: UUID,
    ) -> dict[ItemStatus, int]:
        """
        Count a job's items per status (served by the (job_id, status) index).

        Args:
            session: Async database session
            job_id: Parent job UUID

        Returns:
            dict: {ItemStatus: count}; statuses without items are omitted
        """
        stmt = (
            select(UploadItemModel.status, func.count())
            .where(UploadItemModel.job_id == job_id)
            .group_by(UploadItemModel.status)
        )
        result = await session.execute(stmt)
        return {status: count for status, count in result.all()}


upload_item_crud = UploadItemCRUD()
