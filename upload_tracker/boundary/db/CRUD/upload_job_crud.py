"""
Upload job CRUD operations.

apply_item_transition is the job aggregator's storage half: one UPDATE
statement moves a unit between two counters, bumps the version and, when no
item is left pending or in progress, stamps the terminal status and
ended_at. SET expressions read the row as it is when the statement runs, so
concurrent writers serialize on the row lock and never lose an update.

Dependencies: sqlalchemy, upload_tracker.boundary.db.models, upload_tracker.core
System role: Job persistence and atomic counter aggregation
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, and_, case, literal, update
from sqlalchemy.ext.asyncio import AsyncSession

from upload_tracker.boundary.db.base import utcnow
from upload_tracker.boundary.db.CRUD.base_crud import BaseCRUD
from upload_tracker.boundary.db.models.upload_job_model import UploadJobModel
from upload_tracker.core.aggregation import JobCounters, counter_field
from upload_tracker.core.statuses import ItemStatus, JobStatus


class UploadJobCRUD(BaseCRUD[UploadJobModel]):
    """CRUD operations for UploadJobModel."""

    def __init__(self) -> None:
        """Initialize UploadJobCRUD with UploadJobModel."""
        super().__init__(UploadJobModel)

    async def create_job(
        self,
        session: AsyncSession,
        job_id: UUID,
        owner_id: UUID,
        total_items: int,
    ) -> UploadJobModel:
        """
        Add an ACTIVE job with every item counted as pending.

        Args:
            session: Async database session
            job_id: Pre-generated job UUID (item keys are derived from it)
            owner_id: Issuing caller
            total_items: Number of items in the batch

        Returns:
            The pending UploadJobModel (flushed with its items by the caller)
        """
        counters = JobCounters.initial(total_items)
        job = UploadJobModel(
            id=job_id,
            owner_id=owner_id,
            total_items=counters.total,
            pending_count=counters.pending_count,
            in_progress_count=counters.in_progress_count,
            done_count=counters.done_count,
            failed_count=counters.failed_count,
            status=JobStatus.ACTIVE,
            version=1,
        )
        session.add(job)
        return job

    async def apply_item_transition(
        self,
        session: AsyncSession,
        job_id: UUID,
        from_status: ItemStatus,
        to_status: ItemStatus,
        at: datetime | None = None,
    ) -> UploadJobModel | None:
        """
        Fold one item transition into the job counters in a single statement.

        The row only changes while the job is ACTIVE and the source counter
        is positive. A terminal job is never reopened.

        Args:
            session: Async database session
            job_id: Parent job UUID
            from_status: Item status before the transition
            to_status: Item status after the transition
            at: Aggregation timestamp (defaults to now, UTC)

        Returns:
            The updated job row, or None when nothing matched (job missing,
            already terminal, or source counter exhausted)
        """
        at = at or utcnow()
        job = UploadJobModel
        source = getattr(job, counter_field(from_status))
        target = getattr(job, counter_field(to_status))

        open_delta = int(to_status.is_open) - int(from_status.is_open)
        failed_delta = int(to_status is ItemStatus.FAILED)
        settles = job.pending_count + job.in_progress_count + open_delta == 0
        has_failures = job.failed_count + failed_delta > 0
        status_type = job.__table__.c.status.type

        stmt = (
            update(job)
            .where(
                job.id == job_id,
                job.status == JobStatus.ACTIVE,
                source > 0,
            )
            .values(
                {
                    counter_field(from_status): source - 1,
                    counter_field(to_status): target + 1,
                    "version": job.version + 1,
                    "updated_at": at,
                    "status": case(
                        (
                            and_(settles, has_failures),
                            literal(JobStatus.PARTIALLY_FAILED, status_type),
                        ),
                        (settles, literal(JobStatus.COMPLETED, status_type)),
                        else_=job.status,
                    ),
                    "ended_at": case(
                        (settles, literal(at, DateTime(timezone=True))),
                        else_=job.ended_at,
                    ),
                }
            )
            .returning(job)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


upload_job_crud = UploadJobCRUD()
