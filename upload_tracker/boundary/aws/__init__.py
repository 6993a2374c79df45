"""
AWS boundary modules.

Exports: S3UploadClient
"""

from .s3_client import S3UploadClient

__all__ = ["S3UploadClient"]
