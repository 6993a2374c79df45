"""
Job status query service.

Read-only, owner-scoped views of a job: the polling status view and the
re-aggregation audit. Neither ever writes.

Dependencies: upload_tracker.boundary.db.CRUD, upload_tracker.core
System role: Job status query orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from upload_tracker.boundary.db.CRUD.upload_item_crud import upload_item_crud
from upload_tracker.boundary.db.CRUD.upload_job_crud import upload_job_crud
from upload_tracker.boundary.db.models.upload_job_model import UploadJobModel
from upload_tracker.core.aggregation import JobCounters
from upload_tracker.core.results import Rejected, RejectionReason
from upload_tracker.models.job import (
    CounterSnapshot,
    JobAuditResponse,
    JobItemStatus,
    JobStatusResponse,
)

logger = logging.getLogger(__name__)


class JobStatusService:
    """
    Job status query orchestrator.

    Counters come from the job row; item statuses are listed alongside for
    display only.
    """

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize job status service.

        Args:
            db: AsyncSession for read-only queries
        """
        self.db = db

    async def _get_owned_job(self, job_id: UUID, owner_id: UUID) -> UploadJobModel | Rejected:
        job = await upload_job_crud.get_by_id(self.db, job_id)
        if job is None:
            return Rejected(RejectionReason.NOT_FOUND, f"Job {job_id} not found")
        if job.owner_id != owner_id:
            logger.warning(
                "Job query from non-owner",
                extra={"job_id": str(job_id), "owner_id": str(owner_id)},
            )
            return Rejected(RejectionReason.NOT_OWNER, f"Job {job_id} not found")
        return job

    async def get_job_status(
        self,
        job_id: UUID,
        owner_id: UUID,
    ) -> JobStatusResponse | Rejected:
        """
        Get job counters, derived status and item statuses for polling.

        Args:
            job_id: Job UUID
            owner_id: Calling identity

        Returns:
            JobStatusResponse, or Rejected (NOT_FOUND / NOT_OWNER)
        """
        job = await self._get_owned_job(job_id, owner_id)
        if isinstance(job, Rejected):
            return job

        items = await upload_item_crud.list_by_job(self.db, job.id)
        snapshot = CounterSnapshot.from_counters(job.counters)
        return JobStatusResponse(
            **snapshot.model_dump(),
            job_id=job.id,
            status=job.status,
            version=job.version,
            created_at=job.created_at,
            ended_at=job.ended_at,
            items=[
                JobItemStatus(
                    item_id=item.id,
                    name=item.name,
                    status=item.status,
                    size=item.size_bytes,
                    content_type=item.content_type,
                    started_at=item.started_at,
                    ended_at=item.ended_at,
                )
                for item in items
            ],
        )

    async def audit_job(self, job_id: UUID, owner_id: UUID) -> JobAuditResponse | Rejected:
        """
        Recount a job's items by status and compare with its stored counters.

        A mismatch is logged at ERROR; nothing is repaired.

        Args:
            job_id: Job UUID
            owner_id: Calling identity

        Returns:
            JobAuditResponse, or Rejected (NOT_FOUND / NOT_OWNER)
        """
        job = await self._get_owned_job(job_id, owner_id)
        if isinstance(job, Rejected):
            return job

        recorded = job.counters
        recounted = JobCounters.from_status_counts(
            job.total_items,
            await upload_item_crud.count_by_status(self.db, job.id),
        )
        consistent = recorded == recounted and recorded.status is job.status

        if not consistent:
            logger.error(
                "Job counters disagree with item statuses",
                extra={
                    "job_id": str(job.id),
                    "recorded": recorded.__dict__,
                    "recounted": recounted.__dict__,
                    "job_status": job.status.value,
                },
            )

        return JobAuditResponse(
            job_id=job.id,
            status=job.status,
            consistent=consistent,
            recorded=CounterSnapshot.from_counters(recorded),
            recounted=CounterSnapshot.from_counters(recounted),
        )
