"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from upload_tracker.boundary.db.CRUD import upload_job_crud, upload_item_crud

    job = await upload_job_crud.get_by_id(db, job_id)
"""

from upload_tracker.boundary.db.CRUD.base_crud import BaseCRUD
from upload_tracker.boundary.db.CRUD.upload_item_crud import UploadItemCRUD, upload_item_crud
from upload_tracker.boundary.db.CRUD.upload_job_crud import UploadJobCRUD, upload_job_crud

__all__ = [
    "BaseCRUD",
    "UploadItemCRUD",
    "UploadJobCRUD",
    "upload_item_crud",
    "upload_job_crud",
]
