"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Connection management
  - UploadJobModel, UploadItemModel: Persisted entities
  - upload_job_crud, upload_item_crud: CRUD operation singletons

Dependencies: sqlalchemy, upload_tracker.configs
System role: Database adapter for batch jobs and their items
"""

from upload_tracker.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow
from upload_tracker.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from upload_tracker.boundary.db.models import UploadItemModel, UploadJobModel
from upload_tracker.boundary.db.CRUD import (
    BaseCRUD,
    UploadItemCRUD,
    UploadJobCRUD,
    upload_item_crud,
    upload_job_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "utcnow",
    # Connection
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "UploadItemModel",
    "UploadJobModel",
    # CRUD
    "BaseCRUD",
    "UploadItemCRUD",
    "UploadJobCRUD",
    "upload_item_crud",
    "upload_job_crud",
]
