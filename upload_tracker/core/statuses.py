"""
Lifecycle status enums for upload items and upload jobs.

Dependencies: None (pure domain layer)
System role: Shared vocabulary for state machine, persistence and API
"""

import enum


class ItemStatus(str, enum.Enum):
    """
    Upload item lifecycle states.

    PENDING: Created at batch issuance, client has not started the transfer
    IN_PROGRESS: Client reported the transfer as started
    DONE: Client reported the transfer as finished (terminal)
    FAILED: Transfer abandoned before or during the upload (terminal)
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ItemStatus.DONE, ItemStatus.FAILED)

    @property
    def is_open(self) -> bool:
        return not self.is_terminal


class JobStatus(str, enum.Enum):
    """
    Derived batch job states.

    ACTIVE: At least one item is pending or in progress
    COMPLETED: Every item is done
    PARTIALLY_FAILED: Every item is terminal and at least one failed
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    PARTIALLY_FAILED = "partially_failed"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.ACTIVE
