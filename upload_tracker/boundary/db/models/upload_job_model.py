"""
Upload job ORM model.

One row per issued batch. Holds the per-status item counters and the derived
job status; both are only ever changed by the single-statement aggregation
update in UploadJobCRUD.apply_item_transition.

Dependencies: sqlalchemy, upload_tracker.boundary.db.base
System role: Batch aggregate persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from upload_tracker.boundary.db.base import Base, TimestampMixin, UUIDMixin
from upload_tracker.boundary.db.models.types import status_enum
from upload_tracker.core.aggregation import JobCounters
from upload_tracker.core.statuses import JobStatus


class UploadJobModel(Base, UUIDMixin, TimestampMixin):
    """
    Upload job ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        owner_id: Identity of the caller that issued the batch
        total_items: Number of items, fixed at creation
        pending_count / in_progress_count / done_count / failed_count:
            Items currently in each status; always sum to total_items
        status: Derived job status (ACTIVE/COMPLETED/PARTIALLY_FAILED)
        version: Incremented by every applied aggregation
        ended_at: Set once, when the job turns terminal
        created_at / updated_at: Row timestamps (UTC)

    Constraints:
        Counters are non-negative and sum to total_items.
    """

    __tablename__ = "upload_jobs"
    __table_args__ = (
        CheckConstraint("total_items >= 1", name="ck_upload_jobs_total_positive"),
        CheckConstraint(
            "pending_count >= 0 AND in_progress_count >= 0 "
            "AND done_count >= 0 AND failed_count >= 0",
            name="ck_upload_jobs_counters_non_negative",
        ),
        CheckConstraint(
            "pending_count + in_progress_count + done_count + failed_count = total_items",
            name="ck_upload_jobs_counters_sum",
        ),
        Index("ix_upload_jobs_owner_status", "owner_id", "status"),
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)

    total_items: Mapped[int] = mapped_column(Integer, nullable=False)
    pending_count: Mapped[int] = mapped_column(Integer, nullable=False)
    in_progress_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    done_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[JobStatus] = mapped_column(
        status_enum(JobStatus),
        nullable=False,
        default=JobStatus.ACTIVE,
    )

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Bumped on every applied aggregation",
    )

    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="When the job reached a terminal status",
    )

    items = relationship(
        "UploadItemModel",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="UploadItemModel.position",
    )

    @property
    def counters(self) -> JobCounters:
        """Counter snapshot of this row."""
        return JobCounters(
            total=self.total_items,
            pending_count=self.pending_count,
            in_progress_count=self.in_progress_count,
            done_count=self.done_count,
            failed_count=self.failed_count,
        )
