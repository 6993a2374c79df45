"""
Job counter aggregation rules.

A job holds one counter per item status. Every applied item transition moves
exactly one unit from the counter of its source status to the counter of its
target status, so the counters always sum to the job total. The derived job
status depends only on the counters.

The delta itself is applied by UploadJobCRUD.apply_item_transition inside a
single UPDATE statement; this module holds the shared vocabulary and checks.

Dependencies: upload_tracker.core.statuses
System role: Pure aggregation rules shared by persistence, audit and tests
"""

from dataclasses import dataclass

from upload_tracker.core.statuses import ItemStatus, JobStatus

COUNTER_FIELDS: dict[ItemStatus, str] = {
    ItemStatus.PENDING: "pending_count",
    ItemStatus.IN_PROGRESS: "in_progress_count",
    ItemStatus.DONE: "done_count",
    ItemStatus.FAILED: "failed_count",
}


def counter_field(status: ItemStatus) -> str:
    """Name of the job counter tracking items in ``status``."""
    return COUNTER_FIELDS[status]


def derive_status(open_count: int, failed_count: int) -> JobStatus:
    """
    Derive job status from counters.

    Terminal iff nothing is pending or in progress; partially failed iff
    terminal with at least one failure.
    """
    if open_count > 0:
        return JobStatus.ACTIVE
    if failed_count > 0:
        return JobStatus.PARTIALLY_FAILED
    return JobStatus.COMPLETED


@dataclass(frozen=True)
class JobCounters:
    """Snapshot of a job's per-status item counters."""

    total: int
    pending_count: int
    in_progress_count: int = 0
    done_count: int = 0
    failed_count: int = 0

    @classmethod
    def initial(cls, total: int) -> "JobCounters":
        """Counters of a freshly issued job: every item pending."""
        return cls(total=total, pending_count=total)

    @classmethod
    def from_status_counts(cls, total: int, counts: dict[ItemStatus, int]) -> "JobCounters":
        """Build counters from a {status: count} mapping (missing statuses count 0)."""
        return cls(
            total=total,
            pending_count=counts.get(ItemStatus.PENDING, 0),
            in_progress_count=counts.get(ItemStatus.IN_PROGRESS, 0),
            done_count=counts.get(ItemStatus.DONE, 0),
            failed_count=counts.get(ItemStatus.FAILED, 0),
        )

    @property
    def open_count(self) -> int:
        return self.pending_count + self.in_progress_count

    @property
    def is_balanced(self) -> bool:
        """Counters are non-negative and sum to the total."""
        counts = (self.pending_count, self.in_progress_count, self.done_count, self.failed_count)
        return min(counts) >= 0 and sum(counts) == self.total

    @property
    def status(self) -> JobStatus:
        return derive_status(self.open_count, self.failed_count)
