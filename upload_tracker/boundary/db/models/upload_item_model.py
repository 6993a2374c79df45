"""
Upload item ORM model.

One row per item of a batch. Descriptor and storage target are written at
issuance and never updated; status and the started/ended timestamps change
only through conditional updates in UploadItemCRUD.

Dependencies: sqlalchemy, upload_tracker.boundary.db.base
System role: Item lifecycle persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from upload_tracker.boundary.db.base import Base, TimestampMixin, UUIDMixin
from upload_tracker.boundary.db.models.types import status_enum
from upload_tracker.core.statuses import ItemStatus


class UploadItemModel(Base, UUIDMixin, TimestampMixin):
    """
    Upload item ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        job_id: Parent UploadJobModel (cascade delete)
        owner_id: Identity allowed to drive this item
        position: Index of the item within its batch
        name: Client-supplied item name
        size_bytes: Declared object size
        content_type: Declared MIME type
        storage_bucket / storage_key: Upload destination (key unique)
        status: PENDING/IN_PROGRESS/DONE/FAILED
        started_at: Set by begin
        ended_at: Set by complete or fail

    Indexes:
        (job_id, status) for status listings and re-aggregation audits
    """

    __tablename__ = "upload_items"
    __table_args__ = (Index("ix_upload_items_job_status", "job_id", "status"),)

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("upload_jobs.id", ondelete="CASCADE"),
        nullable=False,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Zero-based index of the item within its batch",
    )

    name: Mapped[str] = mapped_column(String(500), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    content_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="application/octet-stream",
    )

    storage_bucket: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_key: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)

    status: Mapped[ItemStatus] = mapped_column(
        status_enum(ItemStatus),
        nullable=False,
        default=ItemStatus.PENDING,
    )
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    job = relationship("UploadJobModel", back_populates="items")
