"""
Job status schemas.

Response schemas for polling and auditing a job.

Dependencies: pydantic
System role: Job status API contracts
"""

import uuid
from datetime import datetime

from upload_tracker.core.aggregation import JobCounters
from upload_tracker.core.statuses import ItemStatus, JobStatus
from upload_tracker.models.common import CamelModel


class CounterSnapshot(CamelModel):
    """Per-status item counts of a job."""

    total: int
    pending: int
    in_progress: int
    done: int
    failed: int

    @classmethod
    def from_counters(cls, counters: JobCounters) -> "CounterSnapshot":
        return cls(
            total=counters.total,
            pending=counters.pending_count,
            in_progress=counters.in_progress_count,
            done=counters.done_count,
            failed=counters.failed_count,
        )


class JobItemStatus(CamelModel):
    """Status line for one item of a job."""

    item_id: uuid.UUID
    name: str
    status: ItemStatus
    size: int
    content_type: str
    started_at: datetime | None = None
    ended_at: datetime | None = None


class JobStatusResponse(CounterSnapshot):
    """Response schema for job status polling."""

    job_id: uuid.UUID
    status: JobStatus
    version: int
    created_at: datetime
    ended_at: datetime | None = None
    items: list[JobItemStatus]


class JobAuditResponse(CamelModel):
    """Stored counters next to a fresh recount of the job's items."""

    job_id: uuid.UUID
    status: JobStatus
    consistent: bool
    recorded: CounterSnapshot
    recounted: CounterSnapshot
