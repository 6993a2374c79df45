"""
Item command schemas.

Response schema for PUT /items/{item_id}/begin|complete|fail.

Dependencies: pydantic
System role: Item transition API contracts
"""

import uuid

from upload_tracker.core.results import TransitionOk
from upload_tracker.core.statuses import ItemStatus, JobStatus
from upload_tracker.models.common import CamelModel
from upload_tracker.models.job import CounterSnapshot


class ItemTransitionResponse(CamelModel):
    """An applied item transition and the job state it produced."""

    item_id: uuid.UUID
    job_id: uuid.UUID
    previous_status: ItemStatus
    status: ItemStatus
    job_status: JobStatus | None = None
    job: CounterSnapshot | None = None

    @classmethod
    def from_result(cls, result: TransitionOk) -> "ItemTransitionResponse":
        return cls(
            item_id=result.item_id,
            job_id=result.job_id,
            previous_status=result.from_status,
            status=result.to_status,
            job_status=result.job_status,
            job=CounterSnapshot.from_counters(result.counters) if result.counters else None,
        )
