"""
S3 uploads bucket configuration.

Settings for the destination bucket and presigned write URL generation.

Dependencies: pydantic_settings
System role: S3 uploads bucket configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3UploadsSettings(BaseSettings):
    """Settings for S3 upload bucket operations."""

    model_config = SettingsConfigDict(
        env_prefix="S3_UPLOADS_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="upload-tracker-dev-items",
        description="S3 bucket receiving client uploads",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 bucket",
    )
    key_prefix: str = Field(
        default="uploads",
        description="Prefix for every generated object key",
    )
    presigned_url_expiry: int = Field(
        default=3600,
        description="Presigned URL expiry in seconds (default 1 hour)",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Custom endpoint for S3-compatible stores (MinIO, LocalStack)",
    )
