"""
Database models package.

Exports:
  - UploadJobModel: Batch job aggregate with per-status counters
  - UploadItemModel: Individual upload item with lifecycle state
  - status_enum: Column type helper storing enum values

Dependencies: sqlalchemy, upload_tracker.boundary.db.base
System role: Database model definitions for domain entities
"""

from upload_tracker.boundary.db.models.types import status_enum
from upload_tracker.boundary.db.models.upload_job_model import UploadJobModel
from upload_tracker.boundary.db.models.upload_item_model import UploadItemModel

__all__ = [
    "UploadItemModel",
    "UploadJobModel",
    "status_enum",
]
