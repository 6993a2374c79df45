"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from upload_tracker.configs.base import BaseSettings
from upload_tracker.configs.database import DatabaseSettings
from upload_tracker.configs.s3_uploads import S3UploadsSettings
from upload_tracker.configs.uploads import UploadSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    s3_uploads: S3UploadsSettings = S3UploadsSettings()
    uploads: UploadSettings = UploadSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from upload_tracker.configs import get_settings
        settings = get_settings()
    """
    return Settings()
