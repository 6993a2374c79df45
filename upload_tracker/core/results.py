"""
Result variants returned by item commands and owner-scoped queries.

Callers at the HTTP boundary translate these deterministically to status
codes; no exception crosses the service layer for an expected outcome.

Dependencies: None (pure domain layer)
System role: Outcome types for commands and queries
"""

import enum
from dataclasses import dataclass
from uuid import UUID

from upload_tracker.core.aggregation import JobCounters
from upload_tracker.core.statuses import ItemStatus, JobStatus


class RejectionReason(str, enum.Enum):
    """Why a command or query was refused."""

    NOT_FOUND = "not_found"
    NOT_OWNER = "not_owner"
    INVALID_TRANSITION = "invalid_transition"


@dataclass(frozen=True)
class Rejected:
    """A refused command or query."""

    reason: RejectionReason
    message: str
    current_status: ItemStatus | None = None


@dataclass(frozen=True)
class TransitionOk:
    """
    An item transition that was applied.

    job_status and counters describe the job row after aggregation; they are
    None when the aggregator declined the delta because the job was already
    terminal.
    """

    item_id: UUID
    job_id: UUID
    from_status: ItemStatus
    to_status: ItemStatus
    job_status: JobStatus | None = None
    counters: JobCounters | None = None


TransitionResult = TransitionOk | Rejected
